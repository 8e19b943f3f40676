"""
Debug helper that prints a sample of the configured remote store's contents
and its top-level folders. Useful for checking credentials and folder names.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mirror_backend.config import get_settings
from mirror_backend.dependencies import build_remote_client
from shared.errors import TransientFetchError


def main() -> int:
    parser = argparse.ArgumentParser(description="List remote store assets")
    parser.add_argument(
        "-p",
        "--prefix",
        type=str,
        default="",
        help="Only list assets under this folder prefix",
    )
    parser.add_argument(
        "-n",
        "--num",
        type=int,
        default=50,
        help="How many assets to fetch",
    )
    parser.add_argument(
        "--show",
        type=int,
        default=10,
        help="How many of the fetched assets to print",
    )
    args = parser.parse_args()

    client = build_remote_client(get_settings())
    try:
        print(f"Fetching first {args.num} resources from {type(client).__name__}...")
        page = client.list_page(args.prefix, args.num)
        if not page.items:
            print("No resources found. Check folder names or resource type.")
        else:
            print(f"Found {len(page.items)} images")
            for i, item in enumerate(page.items[: args.show], start=1):
                print(f"{i}. ID: {item.id}, URL: {item.url}")

        print("\nListing top-level folders...")
        for folder in client.list_root_folders():
            print(folder)
    except TransientFetchError as exc:
        print(f"Remote store fetch error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
