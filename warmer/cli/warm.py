"""Warm the edge cache for every item in a JSON catalog."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from warmer.adapters import WARMERS, CdnWarmer
from warmer.adapters.json_catalog import JsonCatalogStore
from warmer.application.runner import RunReport, WarmRunner
from warmer.config import AppConfig, load_config
from warmer.core.logging_utils import setup_json_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "parse_args", "run_cdn_warm"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Warm the edge cache by requesting every catalog item's canonical URL",
        allow_abbrev=False,
    )
    parser.add_argument("--catalog", type=Path, help="JSON file listing the items to warm.")
    parser.add_argument(
        "--canonical-host",
        help="Rewrite every URL to this host (e.g. 'example.org' or 'example.org:8443').",
    )
    parser.add_argument("--batch-size", type=int, help="Items per batch.")
    parser.add_argument(
        "--max-concurrent",
        type=int,
        help="Maximum concurrent requests; values below 1 mean one at a time.",
    )
    parser.add_argument(
        "--sleep-between-batches", type=float, help="Seconds to pause after each batch."
    )
    parser.add_argument(
        "--no-verify-tls",
        action="store_true",
        help="Skip TLS verification (local testing with self-signed certificates only).",
    )
    parser.add_argument("--item-type", help="Only warm catalog items of this type.")
    parser.add_argument("--cursor", help="Resume after this cursor token.")
    parser.add_argument("--max-batches", type=int, help="Stop after this many batches.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level for this run.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file containing environment variables for the run.",
    )
    parser.add_argument(
        "--list-warmers", action="store_true", help="List available warmers and exit."
    )
    return parser.parse_args(argv)


def _load_env_file(path: Path) -> None:
    """Load environment variables from a .env-style file if present."""
    if not path.exists() or not path.is_file():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _cdn_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.canonical_host is not None:
        overrides["canonical_host"] = args.canonical_host
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.max_concurrent is not None:
        overrides["max_concurrent_requests"] = args.max_concurrent
    if args.sleep_between_batches is not None:
        overrides["sleep_between_batches"] = args.sleep_between_batches
    if args.no_verify_tls:
        overrides["verify_tls"] = False
    if args.item_type is not None:
        overrides["item_type"] = args.item_type
    return overrides


def _prepare_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration with CLI flags taking precedence over the environment."""
    if args.env_file:
        _load_env_file(args.env_file)
    overrides: dict[str, Any] = {}
    cdn = _cdn_overrides(args)
    if cdn:
        overrides["cdn"] = cdn
    if args.log_level:
        overrides["runtime"] = {"log_level": args.log_level}
    return load_config(**overrides)


async def run_cdn_warm(
    warmer: CdnWarmer, *, cursor: str | None = None, max_batches: int | None = None
) -> RunReport:
    try:
        return await WarmRunner(warmer, max_batches=max_batches).run(cursor)
    finally:
        await warmer.aclose()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if args.list_warmers:
        for warmer_id, warmer_cls in WARMERS.items():
            sys.stdout.write(f"{warmer_id}\t{warmer_cls.label}\t{warmer_cls.description}\n")
        return 0

    if args.catalog is None:
        sys.stderr.write("error: --catalog is required\n")
        return 2
    if args.max_batches is not None and args.max_batches < 1:
        sys.stderr.write("error: --max-batches must be positive\n")
        return 2

    try:
        cfg = _prepare_config(args)
    except RuntimeError as exc:
        sys.stderr.write(f"Configuration error: {exc}\n")
        return 2

    setup_json_logging(
        cfg.runtime.log_level, use_loguru=cfg.runtime.use_loguru, log_file=cfg.runtime.log_file
    )

    try:
        store = JsonCatalogStore.from_path(args.catalog)
    except ValueError as exc:
        logger.error("catalog_load_failed", extra={"path": str(args.catalog), "error": str(exc)})
        sys.stderr.write(f"Catalog error: {exc}\n")
        return 2

    warmer = CdnWarmer(store, config=cfg.cdn)
    report = asyncio.run(run_cdn_warm(warmer, cursor=args.cursor, max_batches=args.max_batches))
    sys.stdout.write(json.dumps(report.to_dict()) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
