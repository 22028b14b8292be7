# catalog_enricher/src/catalog_enricher/config.py
"""
Configuration et constantes pour Catalog Enricher
"""

import os

# ---------- Configuration réseau ----------
API_TIMEOUT = 10
USER_AGENT = "CatalogEnricher/1.0 (book catalog enrichment)"
GOOGLE_BOOKS_API = "https://www.googleapis.com/books/v1/volumes"
OPENLIB_BASE = "https://openlibrary.org"
OPENLIB_SEARCH = "https://openlibrary.org/search.json"
OPENLIB_COVERS = "https://covers.openlibrary.org/b"

# ---------- Configuration retry/backoff ----------
MAX_RETRIES = 4
BASE_BACKOFF = 0.6  # seconds
JITTER = 0.25  # seconds, upper bound of the random part

# ---------- Configuration du pipeline ----------
CONCURRENCY = 6
TASK_DELAY = 0.05  # politeness delay between two records of a worker
PROGRESS_EVERY = 20

# ---------- Cache ----------
CACHE_PATH = ".enrich_cache.json"
CACHE_RETENTION_DAYS = 30

# ---------- Genres ----------
UNKNOWN_GENRE = "Unknown"
GENRE_MAX_LENGTH = 40

# ---------- Fichiers ----------
DEFAULT_INPUT = "books.json"
DEFAULT_OUTPUT = "enriched_books.json"
LOG_DIR = "logs"

# ---------- Configuration logging ----------
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 5
LOG_ENCODING = "utf-8"

# ---------- Variables d'environnement ----------
GOOGLE_API_KEY_ENV_VAR = "GOOGLE_BOOKS_API_KEY"
CACHE_PATH_ENV_VAR = "CATALOG_ENRICHER_CACHE"


def google_api_key() -> str:
    """Retourne la clé API Google Books (vide si non définie)."""
    return os.getenv(GOOGLE_API_KEY_ENV_VAR, "").strip()


def default_cache_path() -> str:
    """Retourne le chemin du cache, surchargé par l'environnement si besoin."""
    return os.getenv(CACHE_PATH_ENV_VAR) or CACHE_PATH


# ---------- Initialisation des dossiers ----------
def ensure_directories():
    """Crée les dossiers nécessaires s'ils n'existent pas."""
    os.makedirs(LOG_DIR, exist_ok=True)
