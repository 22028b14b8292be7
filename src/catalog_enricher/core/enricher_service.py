"""
Service d'enrichissement du catalogue.

Service réutilisable qui orchestre tout le workflow: filtrage des entrées,
court-circuit par le cache, cascade des fournisseurs et exécution
concurrente sur le catalogue complet.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import (
    CONCURRENCY,
    PROGRESS_EVERY,
    TASK_DELAY,
    default_cache_path,
    google_api_key,
)
from .cache import EnrichmentCache
from .enrichment import build_default_adapters, merge_cascade
from .enrichment.base import ProviderAdapter
from .identity import clean_isbn, normalize_identity
from .models import EnrichedRecord, EnrichmentResult, InputRecord
from .network_utils import FetchClient
from .scheduler import ProgressCallback, TaskScheduler

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentContext:
    """État partagé d'une exécution: client HTTP, cache, cascade, annulation."""

    client: FetchClient
    cache: EnrichmentCache
    adapters: List[ProviderAdapter]
    cancel_event: threading.Event = field(default_factory=threading.Event)
    concurrency: int = CONCURRENCY
    task_delay: float = TASK_DELAY
    progress_every: int = PROGRESS_EVERY


def build_context(
    cache_path: Optional[str] = None,
    use_cache: bool = True,
    api_key: Optional[str] = None,
    concurrency: int = CONCURRENCY,
    task_delay: float = TASK_DELAY,
) -> EnrichmentContext:
    """Assemble le contexte par défaut à partir de la configuration."""
    cancel_event = threading.Event()
    client = FetchClient(cancel_event=cancel_event)

    path = (cache_path or default_cache_path()) if use_cache else None
    cache = EnrichmentCache(path=path)
    cache.load()

    key = google_api_key() if api_key is None else api_key
    if not key:
        logger.debug("No Google Books API key set; using anonymous quota")

    return EnrichmentContext(
        client=client,
        cache=cache,
        adapters=build_default_adapters(client, api_key=key),
        cancel_event=cancel_event,
        concurrency=concurrency,
        task_delay=task_delay,
    )


class EnricherService:
    """
    Service d'enrichissement du catalogue.

    Fournit les opérations de haut niveau:
    - filtrage explicite des enregistrements vides
    - enrichissement d'un enregistrement (cache puis cascade)
    - enrichissement concurrent du catalogue complet
    """

    def __init__(self, context: EnrichmentContext):
        self.context = context
        logger.debug("EnricherService initialized with %d adapter(s)", len(context.adapters))

    def filter_records(self, records: Sequence[InputRecord]) -> Tuple[List[InputRecord], int]:
        """
        Écarte les enregistrements dont titre, auteur et ISBN sont vides.

        Returns:
            (enregistrements conservés, nombre d'enregistrements écartés)
        """
        kept = []
        dropped = 0
        for i, record in enumerate(records):
            if record.is_empty():
                logger.warning("Dropping input record %d: title, author and ISBN are all empty", i)
                dropped += 1
                continue
            kept.append(record)
        return kept, dropped

    def empty_record(self, record: InputRecord, record_id: int) -> EnrichedRecord:
        return EnrichedRecord.build(record_id, record, clean_isbn(record.isbn), EnrichmentResult())

    def enrich(self, record: InputRecord, record_id: int) -> EnrichedRecord:
        """
        Enrichit un enregistrement.

        Un résultat en cache (non expiré) est retourné sans appel réseau.
        Toute erreur est journalisée et dégradée en résultat vide.

        Args:
            record: Enregistrement d'entrée
            record_id: Identifiant (position dans la sortie)

        Returns:
            EnrichedRecord immuable
        """
        try:
            key = normalize_identity(record)
            cached = self.context.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return EnrichedRecord.build(record_id, record, clean_isbn(record.isbn), cached)

            result = merge_cascade(record, self.context.adapters, self.context.cancel_event)

            # Un résultat interrompu peut être incomplet: on ne le garde pas
            if not self.context.cancel_event.is_set():
                self.context.cache.put(key, result)

            return EnrichedRecord.build(record_id, record, clean_isbn(record.isbn), result)

        except Exception as e:
            logger.exception("Error enriching record %d (%s): %s", record_id, record.title, e)
            return self.empty_record(record, record_id)

    def enrich_all(
        self,
        records: Sequence[InputRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[EnrichedRecord]:
        """
        Enrichit tout le catalogue avec une concurrence bornée.

        Args:
            records: Enregistrements d'entrée (les vides sont écartés)
            on_progress: Callback (terminés, total)

        Returns:
            Enregistrements enrichis, dans l'ordre de l'entrée filtrée
        """
        kept, dropped = self.filter_records(records)
        logger.info("Enriching %d record(s) (%d dropped)", len(kept), dropped)

        scheduler = TaskScheduler(
            concurrency=self.context.concurrency,
            task_delay=self.context.task_delay,
            progress_every=self.context.progress_every,
            on_progress=on_progress,
            cancel_event=self.context.cancel_event,
        )

        def worker(index: int, record: InputRecord) -> EnrichedRecord:
            enriched = self.enrich(record, index)
            logger.debug("Record %d done: %s [%s]", index, enriched.title, enriched.source or "-")
            return enriched

        def fallback(index: int, record: InputRecord) -> EnrichedRecord:
            return self.empty_record(record, index)

        results = scheduler.run_all(kept, worker, fallback)

        if self.context.cancel_event.is_set():
            logger.warning(
                "Run cancelled: unfinished records were written without enrichment"
            )

        try:
            self.context.cache.save()
        except OSError as e:
            logger.warning("Failed to persist cache: %s", e)

        stats = self.context.cache.stats
        logger.info(
            "Processed %d record(s); cache hits=%d misses=%d (%.0f%%)",
            len(results),
            stats.hits,
            stats.misses,
            stats.hit_rate(),
        )
        return results
