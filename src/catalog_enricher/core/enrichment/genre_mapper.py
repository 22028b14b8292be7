# catalog_enricher/src/catalog_enricher/core/enrichment/genre_mapper.py
"""
Mapping et classification de genres.

Responsabilité unique: Transformer le signal brut d'un fournisseur
(catégories Google Books ou sujets OpenLibrary) en un libellé de genre
normalisé.
"""

import logging
import re
from typing import Iterable, List, Pattern, Tuple

from ...config import GENRE_MAX_LENGTH, UNKNOWN_GENRE
from ..models import PartialEnrichment
from ..text_utils import clean_text, truncate

logger = logging.getLogger(__name__)

# Règles ordonnées (genre, mots-clés): la première qui correspond gagne.
# Les genres spécifiques précèdent les fourre-tout "Nonfiction" / "Fiction".
GENRE_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    (
        "Mystery / Thriller",
        ("mystery", "mysteries", "detective", "crime", "thriller", "suspense"),
    ),
    ("Science Fiction", ("science fiction", "sci-fi", "space", "dystopia")),
    ("Fantasy", ("fantasy", "magic", "wizard", "dragon", "fairy tale")),
    ("Romance", ("romance", "love stories", "romantic")),
    ("Biography", ("biography", "autobiography", "memoir")),
    ("History", ("history", "historical")),
    ("Religion", ("religion", "christian", "bible", "spirituality", "theology")),
    ("Kids / YA", ("juvenile", "children", "young adult", "picture book")),
    ("Self-Help", ("self-help", "self help", "personal development", "motivation")),
    ("Business", ("business", "economics", "management", "finance", "entrepreneurship")),
    ("Nonfiction", ("nonfiction", "non-fiction", "essays", "reference")),
    ("Fiction", ("fiction", "novel", "literature", "short stories")),
]

# Mots entiers seulement ("crime" ne correspond pas à "Crimean"), pluriel en -s toléré
_COMPILED_RULES: List[Tuple[str, Pattern]] = [
    (genre, re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")s?\b"))
    for genre, keywords in GENRE_RULES
]


def genre_from_categories(categories: Iterable[str], max_length: int = GENRE_MAX_LENGTH) -> str:
    """
    Genre à partir des catégories Google Books.

    La première catégorie est utilisée telle quelle (tronquée à max_length
    avec un marqueur "…").

    Returns:
        Le libellé, ou UNKNOWN_GENRE si aucune catégorie exploitable
    """
    categories = list(categories)
    if not categories:
        return UNKNOWN_GENRE

    label = clean_text(categories[0])
    if not label:
        return UNKNOWN_GENRE
    return truncate(label, max_length)


def genre_from_subjects(subjects: Iterable[str]) -> str:
    """
    Genre à partir des sujets OpenLibrary.

    Args:
        subjects: Liste de sujets bruts

    Returns:
        Le genre de la première règle dont un mot-clé apparaît comme
        mot entier dans un sujet, ou UNKNOWN_GENRE
    """
    lowered = [s.lower() for s in subjects if s]
    if not lowered:
        return UNKNOWN_GENRE

    for genre, pattern in _COMPILED_RULES:
        if any(pattern.search(subject) for subject in lowered):
            return genre

    return UNKNOWN_GENRE


def classify_partial(partial: PartialEnrichment) -> str:
    """Choisit la stratégie selon le signal fourni par l'adaptateur."""
    if partial.categories:
        genre = genre_from_categories(partial.categories)
    else:
        genre = genre_from_subjects(partial.subjects)

    if genre != UNKNOWN_GENRE:
        logger.debug("Genre from %s: %s", partial.provider, genre)
    return genre
