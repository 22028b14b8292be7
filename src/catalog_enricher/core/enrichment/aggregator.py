# catalog_enricher/src/catalog_enricher/core/enrichment/aggregator.py
"""
Agrégateur de métadonnées multi-sources.

Responsabilité unique: Parcourir la cascade ordonnée des adaptateurs et
fusionner leurs résultats partiels champ par champ.

Politique de fusion:
- couverture et résumé: le premier non vide gagne, jamais écrasé;
- genre: ne peut que passer de "Unknown" à un libellé concret;
- source: fournisseur de la dernière étape ayant rempli la couverture ou
  le résumé (une étape qui ne remplit que le genre ne compte que si aucune
  autre n'a encore fourni couverture ou résumé).
"""

import logging
import threading
from typing import FrozenSet, Optional, Sequence

from ...config import UNKNOWN_GENRE
from ..models import EnrichmentResult, InputRecord
from .base import FIELD_COVER, FIELD_DESCRIPTION, FIELD_GENRE, ProviderAdapter
from .genre_mapper import classify_partial

logger = logging.getLogger(__name__)


class _MergeState:
    def __init__(self):
        self.cover_url = ""
        self.description = ""
        self.genre = UNKNOWN_GENRE
        self.source = ""
        self.source_from_content = False

    def missing(self) -> FrozenSet[str]:
        fields = set()
        if not self.cover_url:
            fields.add(FIELD_COVER)
        if not self.description:
            fields.add(FIELD_DESCRIPTION)
        if self.genre == UNKNOWN_GENRE:
            fields.add(FIELD_GENRE)
        return frozenset(fields)

    def result(self) -> EnrichmentResult:
        return EnrichmentResult(
            cover_url=self.cover_url,
            description=self.description,
            genre=self.genre,
            source=self.source,
        )


def merge_cascade(
    record: InputRecord,
    adapters: Sequence[ProviderAdapter],
    cancel_event: Optional[threading.Event] = None,
) -> EnrichmentResult:
    """
    Enrichit un enregistrement en interrogeant les adaptateurs dans l'ordre.

    La cascade s'arrête dès que couverture, résumé et genre sont remplis.
    Les adaptateurs non applicables (pas d'ISBN, pas de titre/auteur) sont
    ignorés sans appel réseau.

    Args:
        record: Enregistrement à enrichir
        adapters: Adaptateurs par ordre de priorité
        cancel_event: Si positionné, arrête la cascade avant l'étape suivante

    Returns:
        Résultat fusionné (éventuellement vide, ce qui n'est pas une erreur)
    """
    state = _MergeState()

    for adapter in adapters:
        missing = state.missing()
        if not missing:
            break
        if cancel_event is not None and cancel_event.is_set():
            logger.debug("Cascade cancelled before %s", adapter.name)
            break
        if not adapter.applies_to(record):
            logger.debug("Skipping %s: not applicable", adapter.name)
            continue

        partial = adapter.try_enrich(record, missing)

        filled_content = False
        if not state.cover_url and partial.cover_url:
            state.cover_url = partial.cover_url
            filled_content = True
        if not state.description and partial.description:
            state.description = partial.description
            filled_content = True

        filled_genre = False
        if state.genre == UNKNOWN_GENRE:
            genre = classify_partial(partial)
            if genre != UNKNOWN_GENRE:
                state.genre = genre
                filled_genre = True

        if filled_content:
            state.source = partial.provider
            state.source_from_content = True
        elif filled_genre and not state.source_from_content:
            state.source = partial.provider

        logger.debug(
            "%s filled: content=%s genre=%s; missing now %s",
            adapter.name,
            filled_content,
            filled_genre,
            sorted(state.missing()),
        )

    result = state.result()
    logger.info(
        "Enrichment complete: genre=%s, cover=%s, summary=%s, source=%s",
        result.genre,
        "Yes" if result.cover_url else "No",
        "Yes" if result.description else "No",
        result.source or "-",
    )
    return result
