# catalog_enricher/src/catalog_enricher/core/network_utils.py
"""
Utilitaires réseau génériques (retry backoff, requêtes HTTP JSON).
"""

import logging
import random
import threading
from typing import Any, Dict, Optional

import requests

from ..config import API_TIMEOUT, BASE_BACKOFF, JITTER, MAX_RETRIES, USER_AGENT

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429})


class RetryableHTTPError(requests.HTTPError):
    """Statut HTTP transitoire (429 ou 5xx) qui mérite une nouvelle tentative."""


RETRYABLE_EXCEPTIONS = (requests.Timeout, requests.ConnectionError, RetryableHTTPError)


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS or 500 <= status_code <= 599


def build_session() -> requests.Session:
    """Crée une session partagée avec un User-Agent explicite."""
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    return session


class FetchClient:
    """
    Client HTTP GET JSON avec retry exponentiel.

    Ne lève jamais d'exception vers l'appelant: toute erreur réseau ou HTTP
    se traduit par None une fois les tentatives épuisées.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = API_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        base_delay: float = BASE_BACKOFF,
        jitter: float = JITTER,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.session = session or build_session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.jitter = jitter
        self.cancel_event = cancel_event or threading.Event()

    def backoff_delay(self, attempt: int) -> float:
        """Délai avant la tentative suivante: base * 2^attempt + jitter aléatoire."""
        return self.base_delay * (2**attempt) + random.uniform(0, self.jitter)

    def _get_once(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        logger.debug("HTTP GET %s params=%s", url, params)
        r = self.session.get(url, params=params, timeout=self.timeout)
        if is_retryable_status(r.status_code):
            raise RetryableHTTPError(f"{r.status_code} from {url}", response=r)
        return r

    def _get_with_retry(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        attempt = 0
        while True:
            try:
                logger.debug("Attempt %d for %s", attempt + 1, url)
                return self._get_once(url, params)
            except RETRYABLE_EXCEPTIONS as e:
                if attempt >= self.max_retries:
                    logger.warning("Max retries reached for %s: %s", url, e)
                    raise
                sleep_time = self.backoff_delay(attempt)
                logger.warning(
                    "Error on attempt %d for %s: %s -- backing off %.2fs",
                    attempt + 1,
                    url,
                    e,
                    sleep_time,
                )
                if self.cancel_event.wait(sleep_time):
                    logger.info("Fetch cancelled during backoff for %s", url)
                    raise
                attempt += 1

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        Effectue un GET et retourne le JSON décodé.

        Args:
            url: URL à interroger
            params: Paramètres de requête (encodés par requests)

        Returns:
            Valeur JSON, ou None (statut terminal, retries épuisés,
            JSON invalide ou annulation)
        """
        if self.cancel_event.is_set():
            logger.debug("Skipping %s: fetch cancelled", url)
            return None

        try:
            r = self._get_with_retry(url, params)
        except requests.RequestException as e:
            logger.debug("Giving up on %s: %s", url, e)
            return None

        if not 200 <= r.status_code < 300:
            logger.debug("Terminal status %d for %s", r.status_code, url)
            return None

        try:
            return r.json()
        except ValueError as e:
            logger.warning("Invalid JSON from %s: %s", url, e)
            return None

    def close(self):
        self.session.close()
