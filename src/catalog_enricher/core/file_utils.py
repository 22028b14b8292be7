# catalog_enricher/src/catalog_enricher/core/file_utils.py
"""
Logique pour les opérations sur le système de fichiers (lecture de
l'entrée, écriture atomique de la sortie).
"""

import json
import logging
import os
import stat
import tempfile
from typing import Any, Dict, List, Sequence

from isbnlib import is_isbn10, is_isbn13

from .identity import clean_isbn
from .models import EnrichedRecord, InputRecord
from .text_utils import clean_text

logger = logging.getLogger(__name__)

# Variantes de clés rencontrées dans les exports du catalogue
TITLE_KEYS = ("title", "Title")
AUTHOR_KEYS = ("author", "Author", "Auther")
ISBN_KEYS = ("isbn", "ISBN")


class InputFormatError(ValueError):
    """Le fichier d'entrée n'a pas la forme attendue (tableau JSON d'objets)."""


def _first_value(row: Dict[str, Any], keys: Sequence[str]) -> str:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return clean_text(value)
    return ""


def record_from_row(row: Dict[str, Any]) -> InputRecord:
    """Normalise les alias de clés d'une ligne brute."""
    return InputRecord(
        title=_first_value(row, TITLE_KEYS),
        author=_first_value(row, AUTHOR_KEYS),
        isbn=_first_value(row, ISBN_KEYS),
    )


def is_plausible_isbn(isbn: str) -> bool:
    """Vérifie la somme de contrôle ISBN-10 / ISBN-13."""
    cleaned = clean_isbn(isbn)
    return bool(cleaned) and (is_isbn10(cleaned) or is_isbn13(cleaned))


def load_input_records(path: str) -> List[InputRecord]:
    """
    Lit le fichier JSON d'entrée.

    Args:
        path: Chemin vers un tableau JSON d'objets

    Returns:
        Liste d'InputRecord dans l'ordre du fichier

    Raises:
        OSError: fichier illisible
        InputFormatError: JSON invalide ou pas un tableau
    """
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except ValueError as e:
            raise InputFormatError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(raw, list):
        raise InputFormatError(f"{path} must contain a JSON array, got {type(raw).__name__}")

    records = []
    for i, row in enumerate(raw):
        if not isinstance(row, dict):
            logger.warning("Skipping input row %d: not an object", i)
            continue
        record = record_from_row(row)
        if record.isbn and not is_plausible_isbn(record.isbn):
            logger.warning("Row %d has a suspicious ISBN %r (used as-is)", i, record.isbn)
        records.append(record)

    logger.info("Loaded %d record(s) from %s", len(records), path)
    return records


def _target_mode(path: str) -> int:
    """Mode du fichier publié: celui de la cible existante, sinon 0666 moins l'umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_json(path: str, data: Any, prefix: str = ".tmp-", **dump_kwargs) -> None:
    """
    Écrit une valeur JSON de manière atomique.

    Le JSON est d'abord écrit dans un fichier temporaire du même dossier,
    puis renommé: une erreur ne laisse jamais de fichier tronqué. mkstemp
    crée le temporaire en 0600, le mode final est donc rétabli avant le
    renommage.
    """
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_path = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=folder)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, **dump_kwargs)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def write_output(path: str, records: Sequence[EnrichedRecord]) -> None:
    """Écrit le jeu de données enrichi (tableau JSON) de manière atomique."""
    atomic_write_json(path, [r.to_dict() for r in records], prefix=".enriched-", indent=2)
    logger.info("Wrote %d record(s) to %s", len(records), path)
