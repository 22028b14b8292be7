# tests/conftest.py
"""
Configuration globale pour pytest.

Fournit des fixtures réutilisables pour tous les tests.
"""

import threading
from typing import Dict, List, Optional

import pytest

from catalog_enricher.core.cache import EnrichmentCache
from catalog_enricher.core.enrichment.base import MODE_ISBN, MODE_SEARCH, ProviderAdapter
from catalog_enricher.core.enricher_service import EnrichmentContext
from catalog_enricher.core.models import InputRecord, PartialEnrichment


class StubAdapter(ProviderAdapter):
    """Adaptateur de test qui retourne un résultat partiel prédéfini."""

    def __init__(self, provider: str, mode: str, partial: Optional[PartialEnrichment] = None):
        super().__init__(client=None)
        self.provider = provider
        self.mode = mode
        self.partial = partial or PartialEnrichment.empty(provider)
        self.calls: List[InputRecord] = []
        self.missing_seen: List[frozenset] = []

    def _lookup(self, record, missing):
        self.calls.append(record)
        self.missing_seen.append(missing)
        return self.partial


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance_days(self, days: float):
        self.now += days * 24 * 60 * 60


@pytest.fixture
def stub_adapter():
    """Fabrique d'adaptateurs de test."""

    def make(provider="google", mode=MODE_ISBN, **fields):
        partial = PartialEnrichment(provider=provider, **fields) if fields else None
        return StubAdapter(provider, mode, partial)

    return make


@pytest.fixture
def isbn_mode():
    return MODE_ISBN


@pytest.fixture
def search_mode():
    return MODE_SEARCH


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def memory_cache(fake_clock):
    """Cache en mémoire piloté par une horloge simulée."""
    return EnrichmentCache(path=None, clock=fake_clock)


@pytest.fixture
def make_context(memory_cache):
    """Construit un EnrichmentContext sans réseau autour d'une cascade donnée."""

    def make(adapters, concurrency=2, task_delay=0.0):
        return EnrichmentContext(
            client=None,
            cache=memory_cache,
            adapters=list(adapters),
            cancel_event=threading.Event(),
            concurrency=concurrency,
            task_delay=task_delay,
        )

    return make


@pytest.fixture
def dune_record() -> InputRecord:
    return InputRecord(title="Dune", author="Herbert", isbn="9780441013593")


@pytest.fixture
def sample_rows() -> List[Dict]:
    """Retourne des lignes d'entrée d'exemple (clés variées)."""
    return [
        {"title": "Dune", "author": "Frank Herbert", "isbn": "978-0-441-01359-3"},
        {"Title": "Emma", "Auther": "Jane Austen", "ISBN": ""},
        {"Title": "", "Author": "", "ISBN": ""},
    ]


@pytest.fixture
def mock_http_response():
    """Retourne un mock de réponse HTTP."""

    class MockResponse:
        def __init__(self, json_data=None, status_code=200, invalid_json=False):
            self.json_data = json_data
            self.status_code = status_code
            self.invalid_json = invalid_json
            self.text = str(json_data)

        def json(self):
            if self.invalid_json:
                raise ValueError("Expecting value: line 1 column 1 (char 0)")
            return self.json_data

    return MockResponse
