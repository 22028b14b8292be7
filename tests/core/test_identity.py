"""
Tests pour le module core.identity.
"""

from catalog_enricher.core.identity import clean_isbn, first_author_token, normalize_identity
from catalog_enricher.core.models import InputRecord


class TestCleanIsbn:
    def test_strips_separators(self):
        assert clean_isbn("978-0-441-01359-3") == "9780441013593"

    def test_uppercases_x(self):
        assert clean_isbn("0-8044-2957-x") == "080442957X"

    def test_empty(self):
        assert clean_isbn("") == ""
        assert clean_isbn(None) == ""


class TestNormalizeIdentity:
    """Tests pour normalize_identity."""

    def test_isbn_preferred(self):
        record = InputRecord(title="Dune", author="Frank Herbert", isbn="978-0441013593")
        assert normalize_identity(record) == "isbn:9780441013593"

    def test_same_isbn_same_key(self):
        a = InputRecord(title="Dune", isbn="9780441013593")
        b = InputRecord(title="Something else", author="X", isbn=" 978 0441013593 ")
        assert normalize_identity(a) == normalize_identity(b)

    def test_title_author_composite(self):
        record = InputRecord(title="  The   Hobbit ", author="J.R.R. Tolkien")
        assert normalize_identity(record) == "title:the hobbit|j.r.r."

    def test_case_and_whitespace_variants_collide(self):
        a = InputRecord(title="Emma", author="Jane Austen")
        b = InputRecord(title=" EMMA  ", author="jane   AUSTEN")
        assert normalize_identity(a) == normalize_identity(b)

    def test_identical_records_identical_keys(self):
        record = InputRecord(title="Emma", author="Austen")
        assert normalize_identity(record) == normalize_identity(InputRecord(**record.__dict__))

    def test_empty_record(self):
        assert normalize_identity(InputRecord()) == ""

    def test_first_author_token(self):
        assert first_author_token("  Ursula K. Le Guin") == "ursula"
        assert first_author_token("") == ""
