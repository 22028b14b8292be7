"""
Cache des résultats d'enrichissement, indexé par identité normalisée.

Expiration paresseuse: une entrée plus vieille que la durée de rétention est
traitée comme absente à la lecture, sans être supprimée.
"""

import json
import logging
import os
import threading
import time
from typing import Callable, Dict, Optional

from ..config import CACHE_RETENTION_DAYS
from .file_utils import atomic_write_json
from .models import CacheEntry, EnrichmentResult

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class CacheStats:
    """Compteurs thread-safe de hits / misses."""

    def __init__(self):
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.expired = 0
        self.corrupt = 0

    def record(self, outcome: str):
        with self._lock:
            setattr(self, outcome, getattr(self, outcome) + 1)

    def hit_rate(self) -> float:
        """Return cache hit rate as percentage (0-100)."""
        with self._lock:
            total = self.hits + self.misses
            if total == 0:
                return 0.0
            return (self.hits / total) * 100


class EnrichmentCache:
    """
    Stockage clé/valeur des résultats, optionnellement persisté en JSON.

    Args:
        path: Fichier JSON de persistance (None = mémoire uniquement)
        retention_days: Durée de validité d'une entrée
        clock: Source du temps courant (secondes epoch)
    """

    def __init__(
        self,
        path: Optional[str] = None,
        retention_days: float = CACHE_RETENTION_DAYS,
        clock: Callable[[], float] = time.time,
    ):
        self.path = path
        self.retention = retention_days * SECONDS_PER_DAY
        self.clock = clock
        self.stats = CacheStats()
        self._lock = threading.Lock()
        # Valeurs brutes: la validation est faite à la lecture
        self._store: Dict[str, dict] = {}

    def load(self) -> int:
        """Charge le fichier de persistance; retourne le nombre d'entrées."""
        if not self.path or not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, e)
            return 0
        if not isinstance(data, dict):
            logger.warning("Ignoring cache file %s: not a JSON object", self.path)
            return 0
        with self._lock:
            self._store = data
        logger.info("Loaded %d cache entries from %s", len(data), self.path)
        return len(data)

    def _is_fresh(self, raw, now: float) -> bool:
        try:
            return now - float(raw["stored_at"]) <= self.retention
        except (KeyError, TypeError, ValueError):
            return False

    def save(self):
        """
        Écrit le cache de manière atomique (fichier temporaire + rename).

        Les entrées expirées ou illisibles ne sont pas réécrites: le fichier
        ne grossit pas indéfiniment d'une exécution à l'autre.
        """
        if not self.path:
            return
        now = self.clock()
        with self._lock:
            snapshot = {k: v for k, v in self._store.items() if self._is_fresh(v, now)}
            dropped = len(self._store) - len(snapshot)
        atomic_write_json(self.path, snapshot, prefix=".cache-")
        logger.debug(
            "Saved %d cache entries to %s (%d stale dropped)", len(snapshot), self.path, dropped
        )

    def _decode(self, key: str, raw) -> Optional[CacheEntry]:
        try:
            stored_at = float(raw["stored_at"])
            value = EnrichmentResult.from_dict(raw["value"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Corrupt cache entry for %s: %s", key, e)
            return None
        return CacheEntry(key=key, value=value, stored_at=stored_at)

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        if not key:
            return None
        with self._lock:
            raw = self._store.get(key)
        if raw is None:
            self.stats.record("misses")
            return None

        entry = self._decode(key, raw)
        if entry is None:
            self.stats.record("corrupt")
            self.stats.record("misses")
            return None

        if self.clock() - entry.stored_at > self.retention:
            logger.debug("Cache expired for %s", key)
            self.stats.record("expired")
            self.stats.record("misses")
            return None

        self.stats.record("hits")
        return entry

    def get(self, key: str) -> Optional[EnrichmentResult]:
        entry = self.get_entry(key)
        return entry.value if entry else None

    def put(self, key: str, value: EnrichmentResult):
        if not key:
            return
        raw = {"value": value.to_dict(), "stored_at": self.clock()}
        with self._lock:
            self._store[key] = raw

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
