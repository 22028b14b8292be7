"""
Tests pour le module core.file_utils.
"""

import json
import os
import stat
from unittest.mock import patch

import pytest

from catalog_enricher.core.file_utils import (
    InputFormatError,
    is_plausible_isbn,
    load_input_records,
    write_output,
)
from catalog_enricher.core.models import EnrichedRecord, InputRecord


class TestLoadInputRecords:
    """Tests pour load_input_records."""

    def test_aliases_normalized(self, tmp_path, sample_rows):
        path = tmp_path / "books.json"
        path.write_text(json.dumps(sample_rows), encoding="utf-8")

        records = load_input_records(str(path))

        assert records == [
            InputRecord(title="Dune", author="Frank Herbert", isbn="978-0-441-01359-3"),
            InputRecord(title="Emma", author="Jane Austen", isbn=""),
            InputRecord(),
        ]

    def test_numeric_isbn_coerced(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps([{"title": "Dune", "isbn": 9780441013593}]), encoding="utf-8")

        assert load_input_records(str(path))[0].isbn == "9780441013593"

    def test_non_object_rows_skipped(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps([{"title": "Dune"}, "oops", 3]), encoding="utf-8")

        assert len(load_input_records(str(path))) == 1

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text(json.dumps({"title": "Dune"}), encoding="utf-8")

        with pytest.raises(InputFormatError):
            load_input_records(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "books.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(InputFormatError):
            load_input_records(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_input_records(str(tmp_path / "absent.json"))


class TestWriteOutput:
    """Tests pour write_output."""

    def test_writes_json_array(self, tmp_path):
        path = tmp_path / "out" / "enriched.json"
        record = EnrichedRecord(id=0, title="Dune", author="Herbert", isbn="9780441013593")

        write_output(str(path), [record])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == [
            {
                "id": 0,
                "title": "Dune",
                "author": "Herbert",
                "isbn": "9780441013593",
                "coverUrl": "",
                "description": "",
                "genre": "Unknown",
                "source": "",
            }
        ]

    def test_failure_leaves_previous_file_intact(self, tmp_path):
        """Test aucune sortie tronquée en cas d'erreur."""
        path = tmp_path / "enriched.json"
        path.write_text("[]", encoding="utf-8")
        record = EnrichedRecord(id=0, title="Dune", author="", isbn="")

        with patch("catalog_enricher.core.file_utils.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                write_output(str(path), [record])

        assert path.read_text(encoding="utf-8") == "[]"
        assert [p.name for p in tmp_path.iterdir()] == ["enriched.json"]

    def test_output_mode_follows_umask(self, tmp_path):
        """Test la sortie publiée est lisible par tous sous umask 022."""
        path = tmp_path / "enriched.json"
        record = EnrichedRecord(id=0, title="Dune", author="", isbn="")

        old = os.umask(0o022)
        try:
            write_output(str(path), [record])
        finally:
            os.umask(old)

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o644

    def test_existing_mode_preserved(self, tmp_path):
        path = tmp_path / "enriched.json"
        path.write_text("[]", encoding="utf-8")
        os.chmod(path, 0o640)

        write_output(str(path), [])

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o640


class TestIsPlausibleIsbn:
    def test_valid_isbn13(self):
        assert is_plausible_isbn("978-0-441-01359-3")

    def test_valid_isbn10(self):
        assert is_plausible_isbn("0441013597")

    def test_bad_checksum(self):
        assert not is_plausible_isbn("9780441013590")

    def test_empty(self):
        assert not is_plausible_isbn("")
