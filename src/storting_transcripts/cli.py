"""Command line interface for the transcript indexer."""
from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from .config import AppConfig, load_config
from .core.errors import IndexingError
from .pipeline import ALL_STAGES
from .runtime import create_pipeline

LOGGER = logging.getLogger(__name__)

_COMMAND_STAGES: Dict[str, Sequence[str]] = {
    "run": ALL_STAGES,
    "fetch": ("fetch",),
    "convert": ("convert",),
    "index": ("index",),
}

EXIT_OK = 0
EXIT_UNIT_FAILURES = 1
EXIT_FATAL = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Index Stortinget session transcripts into Elasticsearch")
    parser.add_argument(
        "command",
        choices=sorted(_COMMAND_STAGES),
        help="'run' executes all stages; the others run a single stage against the cache",
    )
    parser.add_argument("--config", type=Path, help="Path to an explicit configuration file")
    parser.add_argument("--data-dir", help="Directory holding the cached <id>.xml and <id>.json files")
    parser.add_argument(
        "--session",
        dest="sessions",
        action="append",
        help="Session id to download, e.g. 2023-2024 (repeatable)",
    )
    parser.add_argument("--elasticsearch-url", help="URL of the Elasticsearch cluster")
    parser.add_argument("--index-name", help="Name of the target index")
    parser.add_argument(
        "--create-index",
        action="store_true",
        default=None,
        help="Delete and recreate the index before indexing (destroys its contents)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Download and convert again even if the cache already holds the result",
    )
    parser.add_argument(
        "--refresh-listings",
        action="store_true",
        default=None,
        help="Ask the API for session listings again but keep cached transcripts",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    cache = config.cache
    if args.data_dir:
        cache = dataclasses.replace(cache, data_dir=args.data_dir)
    search = config.search
    if args.elasticsearch_url:
        search = dataclasses.replace(search, elasticsearch_url=args.elasticsearch_url)
    if args.index_name:
        search = dataclasses.replace(search, index_name=args.index_name)
    if args.create_index is not None:
        search = dataclasses.replace(search, create_index=args.create_index)
    pipeline = config.pipeline
    if args.sessions:
        pipeline = dataclasses.replace(pipeline, sessions=list(args.sessions))
    if args.force is not None:
        pipeline = dataclasses.replace(pipeline, force=args.force)
    if args.refresh_listings is not None:
        pipeline = dataclasses.replace(pipeline, refresh_listings=args.refresh_listings)
    return dataclasses.replace(config, cache=cache, search=search, pipeline=pipeline)


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = _apply_overrides(load_config(args.config), args)
    stages = _COMMAND_STAGES[args.command]
    if "fetch" in stages and not config.pipeline.sessions:
        LOGGER.warning("No sessions configured, nothing will be downloaded")

    resources = create_pipeline(config)
    try:
        summary = resources.pipeline.run(
            config.pipeline.sessions,
            stages=stages,
            recreate_index=config.search.create_index,
        )
    except IndexingError as exc:
        LOGGER.error("Aborting: %s", exc)
        return EXIT_FATAL
    finally:
        resources.close()

    for failure in summary.failures:
        LOGGER.warning("failed %s %s: %s", failure.stage, failure.identifier, failure.message)
    if not summary.ok:
        LOGGER.error("%s unit(s) failed", len(summary.failures))
        return EXIT_UNIT_FAILURES
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
