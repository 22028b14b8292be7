# catalog_enricher/src/catalog_enricher/core/enrichment/__init__.py
"""
Module Enrichment - Cascade multi-sources pour l'enrichissement du catalogue.

Ce module orchestre les appels aux API externes (Google Books, OpenLibrary)
pour compléter chaque livre avec une couverture, un résumé et un genre.
"""

from typing import List

from ..network_utils import FetchClient
from .aggregator import merge_cascade
from .base import ProviderAdapter
from .genre_mapper import classify_partial, genre_from_categories, genre_from_subjects
from .google_books import GoogleBooksIsbnAdapter, GoogleBooksSearchAdapter
from .openlibrary import OpenLibraryIsbnAdapter, OpenLibrarySearchAdapter


def build_default_adapters(client: FetchClient, api_key: str = "") -> List[ProviderAdapter]:
    """Retourne la cascade par ordre de priorité."""
    return [
        GoogleBooksIsbnAdapter(client, api_key=api_key),
        OpenLibraryIsbnAdapter(client),
        GoogleBooksSearchAdapter(client, api_key=api_key),
        OpenLibrarySearchAdapter(client),
    ]


__all__ = [
    "build_default_adapters",
    "classify_partial",
    "genre_from_categories",
    "genre_from_subjects",
    "merge_cascade",
    "GoogleBooksIsbnAdapter",
    "GoogleBooksSearchAdapter",
    "OpenLibraryIsbnAdapter",
    "OpenLibrarySearchAdapter",
    "ProviderAdapter",
]
