"""
Contrat commun des adaptateurs de fournisseurs.
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet

from pydantic import ValidationError

from ..identity import clean_isbn
from ..models import InputRecord, PartialEnrichment
from ..network_utils import FetchClient

logger = logging.getLogger(__name__)

FIELD_COVER = "cover"
FIELD_DESCRIPTION = "description"
FIELD_GENRE = "genre"
TARGET_FIELDS: FrozenSet[str] = frozenset({FIELD_COVER, FIELD_DESCRIPTION, FIELD_GENRE})

MODE_ISBN = "isbn"
MODE_SEARCH = "search"


class ProviderAdapter(ABC):
    """
    Adaptateur d'un fournisseur pour un mode de requête (ISBN ou recherche).

    Les sous-classes implémentent `_lookup`; `try_enrich` garantit qu'aucune
    exception ne remonte vers l'orchestrateur.
    """

    provider: str = ""
    mode: str = ""

    def __init__(self, client: FetchClient):
        self.client = client

    @property
    def name(self) -> str:
        return f"{self.provider}:{self.mode}"

    def applies_to(self, record: InputRecord) -> bool:
        if self.mode == MODE_ISBN:
            return bool(clean_isbn(record.isbn))
        return bool(record.title.strip() or record.author.strip())

    def try_enrich(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        """
        Interroge le fournisseur pour les champs encore manquants.

        Args:
            record: Enregistrement à enrichir
            missing: Champs cibles non encore remplis

        Returns:
            Résultat partiel; vide si le fournisseur n'a rien ou a échoué
        """
        try:
            return self._lookup(record, missing)
        except ValidationError as e:
            logger.warning("%s: unexpected response shape: %s", self.name, e.error_count())
        except Exception as e:
            logger.warning("Failed during %s query: %s", self.name, e)
        return PartialEnrichment.empty(self.provider)

    @abstractmethod
    def _lookup(self, record: InputRecord, missing: FrozenSet[str]) -> PartialEnrichment:
        raise NotImplementedError
