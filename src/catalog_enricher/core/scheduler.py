"""
Exécution des tâches d'enrichissement (threading) avec concurrence bornée.
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config import CONCURRENCY, PROGRESS_EVERY, TASK_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]


class TaskScheduler:
    """
    Pool fixe de workers tirant l'index suivant d'un curseur partagé.

    Chaque résultat est rangé à l'index de sa tâche: l'ordre de sortie est
    celui de l'entrée quel que soit l'ordre de complétion. L'échec d'une
    tâche est remplacé par `fallback` et n'affecte pas les autres.
    """

    def __init__(
        self,
        concurrency: int = CONCURRENCY,
        task_delay: float = TASK_DELAY,
        progress_every: int = PROGRESS_EVERY,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency
        self.task_delay = task_delay
        self.progress_every = max(1, progress_every)
        self.on_progress = on_progress
        self.cancel_event = cancel_event or threading.Event()
        self._lock = threading.Lock()
        self._cursor = 0
        self._completed = 0

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def _next_index(self, total: int) -> Optional[int]:
        with self._lock:
            if self._cursor >= total:
                return None
            index = self._cursor
            self._cursor += 1
            return index

    def _mark_done(self, total: int):
        with self._lock:
            self._completed += 1
            done = self._completed
        if self.on_progress and (done % self.progress_every == 0 or done == total):
            try:
                self.on_progress(done, total)
            except Exception:
                logger.exception("Progress callback failed")

    def _worker_loop(
        self,
        items: Sequence[T],
        results: List[Optional[R]],
        worker: Callable[[int, T], R],
        fallback: Callable[[int, T], R],
    ):
        total = len(items)
        while True:
            index = self._next_index(total)
            if index is None:
                return
            item = items[index]

            if self.cancel_event.is_set():
                results[index] = fallback(index, item)
                self._mark_done(total)
                continue

            try:
                results[index] = worker(index, item)
            except Exception:
                logger.exception("Task %d failed, using fallback result", index)
                results[index] = fallback(index, item)
            self._mark_done(total)

            # Délai de politesse envers les fournisseurs
            if self.task_delay > 0:
                self.cancel_event.wait(self.task_delay)

    def run_all(
        self,
        items: Sequence[T],
        worker: Callable[[int, T], R],
        fallback: Callable[[int, T], R],
    ) -> List[R]:
        """
        Traite tous les éléments et retourne les résultats alignés sur l'entrée.

        Args:
            items: Éléments à traiter
            worker: Fonction (index, élément) -> résultat
            fallback: Résultat de repli en cas d'échec ou d'annulation

        Returns:
            Liste de même longueur que items, dans le même ordre
        """
        total = len(items)
        with self._lock:
            self._cursor = 0
            self._completed = 0
        results: List[Optional[R]] = [None] * total
        if total == 0:
            return []

        n_workers = min(self.concurrency, total)
        logger.debug("Starting %d worker(s) for %d task(s)", n_workers, total)
        threads = [
            threading.Thread(
                target=self._worker_loop,
                args=(items, results, worker, fallback),
                name=f"enrich-worker-{i + 1}",
                daemon=True,
            )
            for i in range(n_workers)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        return results  # type: ignore[return-value]
