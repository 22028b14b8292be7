"""
Point d'entrée principal pour Catalog Enricher
"""

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from .config import (
    DEFAULT_INPUT,
    DEFAULT_OUTPUT,
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_ENCODING,
    LOG_MAX_BYTES,
    ensure_directories,
)


def setup_logging():
    """Configure le système de logging."""
    ensure_directories()
    logger = logging.getLogger("catalog_enricher")
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    # Handler pour fichier avec rotation
    logfile = os.path.join(LOG_DIR, "catalog_enricher.log")
    handler = RotatingFileHandler(
        logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding=LOG_ENCODING
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Handler pour console
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-enricher",
        description="Enrich a book catalog with covers, descriptions and genres.",
    )
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT, help="JSON array of books")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="enriched JSON output")
    cache = parser.add_mutually_exclusive_group()
    cache.add_argument("--cache", dest="cache_path", help="cache file path")
    cache.add_argument("--no-cache", action="store_true", help="disable the cache")
    parser.add_argument("--concurrency", type=int, help="number of concurrent workers")
    parser.add_argument("--delay", type=float, help="politeness delay between records (s)")
    parser.add_argument("--deadline", type=float, help="wall-clock budget in seconds")
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Lance le mode ligne de commande."""
    logger = logging.getLogger("catalog_enricher")
    args = build_parser().parse_args(argv)

    if not os.path.isfile(args.input):
        print(f"Error: {args.input} is not a valid file")
        return 1
    if args.concurrency is not None and args.concurrency < 1:
        print("Error: --concurrency must be at least 1")
        return 1

    try:
        from .cli import cli_process_file, print_enrichment_summary

        records = cli_process_file(
            args.input,
            args.output,
            cache_path=args.cache_path,
            use_cache=not args.no_cache,
            concurrency=args.concurrency,
            task_delay=args.delay,
            deadline=args.deadline,
        )
        print_enrichment_summary(records)
        return 0
    except Exception as e:
        logger.exception("Error in CLI mode")
        print(f"Error: {e}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Point d'entrée principal."""
    setup_logging()
    return run_cli(argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
