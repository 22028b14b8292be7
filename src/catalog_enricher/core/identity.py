"""
Identité normalisée d'un enregistrement (clé de cache et de déduplication).
"""

import re

from .models import InputRecord

_ISBN_CHARS_RE = re.compile(r"[^0-9Xx]")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_isbn(isbn: str) -> str:
    """Ne conserve que les chiffres et X, en majuscules."""
    if not isbn:
        return ""
    return _ISBN_CHARS_RE.sub("", str(isbn)).upper()


def _normalize_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", (value or "").strip().lower())


def first_author_token(author: str) -> str:
    """Premier mot de l'auteur, en minuscules ("Frank Herbert" -> "frank")."""
    tokens = _normalize_text(author).split(" ")
    return tokens[0] if tokens else ""


def normalize_identity(record: InputRecord) -> str:
    """
    Calcule la clé d'identité d'un enregistrement.

    L'ISBN nettoyé est prioritaire: deux enregistrements partageant le même
    ISBN ont la même identité même si titre et auteur diffèrent. Sans ISBN,
    la clé combine le titre normalisé et le premier mot de l'auteur.

    Returns:
        La clé, ou "" si l'enregistrement est vide
    """
    isbn = clean_isbn(record.isbn)
    if isbn:
        return f"isbn:{isbn}"

    title = _normalize_text(record.title)
    author = first_author_token(record.author)
    if not (title or author):
        return ""
    return f"title:{title}|{author}"
