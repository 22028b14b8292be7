# catalog_enricher/src/catalog_enricher/core/enrichment/openlibrary.py
"""
Logique pour interroger OpenLibrary (édition par ISBN, œuvre, recherche).
"""

import logging
from typing import Dict, FrozenSet, Optional
from urllib.parse import quote

from ...config import OPENLIB_BASE, OPENLIB_COVERS, OPENLIB_SEARCH
from ..identity import clean_isbn
from ..models import InputRecord, PartialEnrichment
from ..text_utils import clean_html_text, clean_text
from .base import FIELD_DESCRIPTION, MODE_ISBN, MODE_SEARCH, ProviderAdapter
from .schemas import OpenLibraryEdition, OpenLibrarySearchResponse, OpenLibraryWork

logger = logging.getLogger(__name__)

PROVIDER = "openlibrary"
SEARCH_FIELDS = "key,title,cover_i,subject"


def cover_url_from_id(cover_id: int) -> str:
    return f"{OPENLIB_COVERS}/id/{cover_id}-L.jpg"


def cover_url_from_isbn(isbn: str) -> str:
    return f"{OPENLIB_COVERS}/isbn/{quote(isbn, safe='')}-L.jpg"


def _clean_subjects(subjects) -> tuple:
    # Les sujets trop longs sont des phrases, pas des étiquettes
    return tuple(s for s in (clean_text(t) for t in subjects) if s and len(s) < 80)


class OpenLibraryIsbnAdapter(ProviderAdapter):
    """Édition OpenLibrary par ISBN, avec résolution de l'œuvre si besoin."""

    provider = PROVIDER
    mode = MODE_ISBN

    def _fetch_work_details(self, work_key: str) -> Optional[OpenLibraryWork]:
        """Récupère les détails de l'Œuvre (Work) OpenLibrary."""
        if not work_key.startswith("/works/"):
            logger.debug("OL: ignoring unexpected work key %s", work_key)
            return None
        data = self.client.get_json(f"{OPENLIB_BASE}{work_key}.json")
        if data is None:
            return None
        return OpenLibraryWork.model_validate(data)

    def _lookup(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        isbn = clean_isbn(record.isbn)
        data = self.client.get_json(f"{OPENLIB_BASE}/isbn/{quote(isbn, safe='')}.json")
        if data is None:
            logger.info("OL: No edition found for ISBN %s", isbn)
            return PartialEnrichment.empty(self.provider)

        edition = OpenLibraryEdition.model_validate(data)

        # 1. Couverture: ID d'édition, sinon URL par ISBN
        if edition.covers:
            cover_url = cover_url_from_id(edition.covers[0])
        else:
            cover_url = cover_url_from_isbn(isbn)

        # 2. Résumé: l'édition, sinon l'Œuvre si le champ manque encore
        description = clean_html_text(edition.description_text)
        subjects = edition.subjects
        if not description and FIELD_DESCRIPTION in missing and edition.works:
            work = self._fetch_work_details(edition.works[0].key)
            if work:
                description = clean_html_text(work.description_text)
                subjects = subjects or work.subjects

        logger.info(
            "OL: Found edition for %s. Subjects: %d, Summary: %s",
            isbn,
            len(subjects),
            "Yes" if description else "No",
        )
        return PartialEnrichment(
            provider=self.provider,
            cover_url=cover_url,
            description=description,
            subjects=_clean_subjects(subjects),
        )


class OpenLibrarySearchAdapter(ProviderAdapter):
    """
    Recherche OpenLibrary par titre/auteur.

    La réponse de recherche ne contient pas de résumé: ce champ reste vide.
    """

    provider = PROVIDER
    mode = MODE_SEARCH

    def _lookup(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        params: Dict[str, object] = {"limit": 1, "fields": SEARCH_FIELDS}
        if record.title.strip():
            params["title"] = record.title.strip()
        if record.author.strip():
            params["author"] = record.author.strip()

        data = self.client.get_json(OPENLIB_SEARCH, params=params)
        if data is None:
            return PartialEnrichment.empty(self.provider)

        response = OpenLibrarySearchResponse.model_validate(data)
        if not response.docs:
            logger.info("OL: No result found for query: %s", params)
            return PartialEnrichment.empty(self.provider)

        doc = response.docs[0]
        cover_url = cover_url_from_id(doc.cover_i) if doc.cover_i and doc.cover_i > 0 else ""
        return PartialEnrichment(
            provider=self.provider,
            cover_url=cover_url,
            subjects=_clean_subjects(doc.subject),
        )
