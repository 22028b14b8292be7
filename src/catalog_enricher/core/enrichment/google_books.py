# catalog_enricher/src/catalog_enricher/core/enrichment/google_books.py
"""
Client Google Books API.

Responsabilité unique: Interroger l'API Google Books (par ISBN ou par
titre/auteur) et normaliser la réponse en résultat partiel.
"""

import logging
from typing import Any, Dict, FrozenSet, Optional

from ...config import GOOGLE_BOOKS_API
from ..identity import clean_isbn
from ..models import InputRecord, PartialEnrichment
from ..network_utils import FetchClient
from ..text_utils import clean_html_text, clean_text, force_https
from .base import MODE_ISBN, MODE_SEARCH, ProviderAdapter
from .schemas import GoogleBooksResponse, GoogleBooksVolumeInfo

logger = logging.getLogger(__name__)

PROVIDER = "google"


def _parse_google_book(info: GoogleBooksVolumeInfo) -> PartialEnrichment:
    """
    Extrait couverture, résumé et catégories d'un volume Google Books.

    Args:
        info: volumeInfo validé

    Returns:
        Résultat partiel du fournisseur
    """
    cover_url = ""
    if info.imageLinks:
        cover_url = force_https(info.imageLinks.thumbnail or info.imageLinks.smallThumbnail or "")

    categories = tuple(c for c in (clean_text(c) for c in info.categories) if c)

    return PartialEnrichment(
        provider=PROVIDER,
        cover_url=cover_url,
        description=clean_html_text(info.description or ""),
        categories=categories,
    )


def build_search_query(title: str, author: str) -> str:
    """Construit la requête q= à partir des mots du titre et de l'auteur."""
    parts = []
    if title:
        parts.append(f"intitle:{title}")
    if author:
        parts.append(f"inauthor:{author}")
    return " ".join(parts)


class GoogleBooksAdapter(ProviderAdapter):
    provider = PROVIDER

    def __init__(self, client: FetchClient, api_key: str = ""):
        super().__init__(client)
        self.api_key = api_key

    def _query(self, q: str) -> Optional[PartialEnrichment]:
        params: Dict[str, Any] = {"q": q, "maxResults": 1}
        if self.api_key:
            params["key"] = self.api_key

        data = self.client.get_json(GOOGLE_BOOKS_API, params=params)
        if data is None:
            return None

        response = GoogleBooksResponse.model_validate(data)
        if not response.items:
            logger.info("Google Books: No result for %s", q)
            return None

        logger.info("Google Books: Found result for %s", q)
        return _parse_google_book(response.items[0].volumeInfo)


class GoogleBooksIsbnAdapter(GoogleBooksAdapter):
    """Recherche Google Books par ISBN (q=isbn:...)."""

    mode = MODE_ISBN

    def _lookup(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        result = self._query(f"isbn:{clean_isbn(record.isbn)}")
        return result or PartialEnrichment.empty(self.provider)


class GoogleBooksSearchAdapter(GoogleBooksAdapter):
    """Recherche Google Books par titre/auteur, meilleur résultat uniquement."""

    mode = MODE_SEARCH

    def _lookup(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        q = build_search_query(record.title.strip(), record.author.strip())
        result = self._query(q)
        return result or PartialEnrichment.empty(self.provider)
