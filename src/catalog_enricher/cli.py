"""
Logique pour le mode ligne de commande.

Utilise EnricherService pour réutiliser la logique d'enrichissement.
"""

import logging
import threading
from collections import Counter
from typing import List, Optional

from .config import UNKNOWN_GENRE
from .core.enricher_service import EnricherService, build_context
from .core.file_utils import load_input_records, write_output
from .core.models import EnrichedRecord

logger = logging.getLogger(__name__)


def _print_progress(done: int, total: int):
    print(f"Enriched {done}/{total}")


def cli_process_file(
    input_path: str,
    output_path: str,
    cache_path: Optional[str] = None,
    use_cache: bool = True,
    concurrency: Optional[int] = None,
    task_delay: Optional[float] = None,
    deadline: Optional[float] = None,
) -> List[EnrichedRecord]:
    """
    Enrichit un fichier de livres en mode CLI.

    Args:
        input_path: Tableau JSON des livres (titre/auteur/ISBN)
        output_path: Fichier JSON enrichi à écrire
        cache_path: Fichier de cache (défaut: configuration)
        use_cache: Si False, aucun cache n'est lu ni écrit
        concurrency: Nombre de workers
        task_delay: Délai de politesse entre deux livres d'un worker
        deadline: Budget en secondes; au-delà, les livres restants sont vides

    Returns:
        Liste des enregistrements enrichis
    """
    logger.info(f"CLI mode - processing file: {input_path}")

    records = load_input_records(input_path)

    options = {}
    if concurrency is not None:
        options["concurrency"] = concurrency
    if task_delay is not None:
        options["task_delay"] = task_delay
    context = build_context(cache_path=cache_path, use_cache=use_cache, **options)

    timer = None
    if deadline is not None:
        timer = threading.Timer(deadline, context.cancel_event.set)
        timer.daemon = True
        timer.start()

    try:
        service = EnricherService(context)
        enriched = service.enrich_all(records, on_progress=_print_progress)
    finally:
        if timer is not None:
            timer.cancel()
        context.client.close()

    write_output(output_path, enriched)
    print(f"Wrote {output_path}")

    logger.info(f"CLI mode - enriched {len(enriched)} records")
    return enriched


def print_enrichment_summary(records: List[EnrichedRecord]):
    """Affiche un résumé des enregistrements enrichis."""
    print("\n=== Résumé de l'enrichissement ===")
    print(f"Livres traités: {len(records)}")
    print(f"Avec couverture: {sum(1 for r in records if r.cover_url)}")
    print(f"Avec résumé: {sum(1 for r in records if r.description)}")
    print(f"Avec genre: {sum(1 for r in records if r.genre != UNKNOWN_GENRE)}")

    sources = Counter(r.source or "aucune" for r in records)
    if records:
        print("\n=== Sources ===")
        for source, count in sorted(sources.items()):
            print(f"  {source}: {count}")
