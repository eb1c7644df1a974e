# src/main.py - v3
"""CLI entry point: load and stats commands.

Usage:
    kbloader load [--docs-dir DIR | --github owner/repo] [--timeout-ms N] [--quick]
    kbloader stats [--docs-dir DIR | --github owner/repo]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from kbloader.config.settings import Settings, load_settings
from kbloader.logging.logger import setup_logging
from kbloader.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings(**_settings_overrides(args))
    except Exception as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(args.verbose, settings)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def cli() -> None:
    """Console-script wrapper."""
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="kbloader",
        description=f"kbloader v{__version__} - knowledge-base loader and cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    source_options = argparse.ArgumentParser(add_help=False)
    group = source_options.add_mutually_exclusive_group()
    group.add_argument(
        "--docs-dir", type=Path, default=None,
        help="Local documents directory (overrides DOCS_DIR)",
    )
    group.add_argument(
        "--github", metavar="OWNER/REPO", default=None,
        help="Read documents from a GitHub repository instead",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- load ---
    p_load = subparsers.add_parser(
        "load", parents=[source_options], help="Print the assembled knowledge base",
    )
    p_load.add_argument(
        "--timeout-ms", type=int, default=None,
        help="Time budget for the load (default: KNOWLEDGE_TIMEOUT_MS)",
    )
    p_load.add_argument(
        "--quick", action="store_true",
        help="Print cached or static knowledge without loading",
    )
    p_load.set_defaults(func=_cmd_load)

    # --- stats ---
    p_stats = subparsers.add_parser(
        "stats", parents=[source_options], help="Run a load and show metrics",
    )
    p_stats.set_defaults(func=_cmd_stats)

    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if getattr(args, "docs_dir", None) is not None:
        overrides["source_type"] = "local"
        overrides["docs_dir"] = args.docs_dir
    if getattr(args, "github", None):
        overrides["source_type"] = "github"
        overrides["github_repository"] = args.github
    return overrides


async def _cmd_load(args: argparse.Namespace, settings: Settings) -> int:
    """Print the knowledge base (fresh, last-good or static)."""
    from kbloader.knowledge.facade_factory import create_knowledge_facade

    facade = create_knowledge_facade(settings)
    try:
        if args.quick:
            text = facade.get_quick_knowledge()
        else:
            text = await facade.get_knowledge_base(args.timeout_ms)
    finally:
        await facade.loader.cancel_load()
        await facade.loader.source.aclose()

    print(text)
    logger.info("Knowledge state: %s", facade.state.value)
    return 0


async def _cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    """Run one load and display metrics and cache statistics."""
    from kbloader.knowledge.facade_factory import create_document_loader

    loader = create_document_loader(settings)
    try:
        await loader.load_all_documents()
    finally:
        await loader.source.aclose()

    metrics = loader.get_load_metrics()
    stats = loader.cache.stats()
    print(f"\nStatistics for {loader.source.name}:")
    print(f"  Documents cached:  {stats.document_count}")
    print(f"  Cached size:       {stats.total_size_bytes} bytes")
    print(f"  Knowledge base:    {stats.knowledge_base_size_bytes} bytes")
    print(f"  Total loads:       {metrics.total_loads}")
    print(f"  Cache hits:        {metrics.cache_hits}")
    print(f"  Cache misses:      {metrics.cache_misses}")
    print(f"  Hit rate:          {metrics.cache_hit_rate:.0%}")
    print(f"  Last load time:    {metrics.last_load_time_ms:.1f}ms")
    return 0


def _setup_logging(verbose: bool, settings: Settings) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
