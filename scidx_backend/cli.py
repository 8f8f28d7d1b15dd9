"""
Command line entry point: rebuild the script index from the project records.

    scidx-build            # merge and write
    scidx-build --dry-run  # report the diff, write nothing
"""
from __future__ import annotations

import argparse
import asyncio

from .config import BuilderSettings
from .features.index import build_index
from .shared import get_logger

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="scidx-build",
        description="Merge project records into the script hash index.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and report the diff without writing any file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = BuilderSettings.from_env()
    result = asyncio.run(build_index(settings, dry_run=args.dry_run))
    if not result.ok:
        logger.error("Index build failed [%s]: %s", result.code, result.error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
