"""
CLI helper to mirror remote assets into the local database without the API.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from asset_pipeline.engine import ASSET_TYPES
from mirror_backend.config import get_settings
from mirror_backend.dependencies import build_sync_engine, get_db_client, get_remote_client

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Sync remote assets into the mirror")
    parser.add_argument(
        "asset_types",
        nargs="*",
        help=f"Asset types to sync, any of {', '.join(sorted(ASSET_TYPES))} (default: all)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Override the page limit of each walk",
    )
    args = parser.parse_args()
    unknown = [name for name in args.asset_types if name not in ASSET_TYPES]
    if unknown:
        parser.error(f"unknown asset types: {', '.join(unknown)}")

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    remote = get_remote_client()
    db = get_db_client()

    truncated = False
    for name in args.asset_types or sorted(ASSET_TYPES):
        engine = build_sync_engine(ASSET_TYPES[name], remote, db, settings)
        if args.max_pages:
            engine.max_pages = args.max_pages
        result = engine.sync()
        logger.info(
            "%s: fetched %d assets in %d pages, committed %d%s",
            name,
            len(result.walk.assets),
            result.walk.pages,
            result.committed,
            " (truncated)" if result.truncated else "",
        )
        truncated = truncated or result.truncated
    return 1 if truncated else 0


if __name__ == "__main__":
    sys.exit(main())
