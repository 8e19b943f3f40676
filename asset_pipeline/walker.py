"""
Cursor-driven walk over a remote store listing.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from asset_pipeline.categorizer import split_asset_path
from shared.constants import DEFAULT_PAGE_SIZE
from shared.errors import TransientFetchError
from shared.types import RemoteAsset, RemoteItem, WalkResult

logger = logging.getLogger(__name__)


def to_remote_asset(item: RemoteItem) -> RemoteAsset:
    folder_path, _ = split_asset_path(item.id)
    return RemoteAsset(
        external_id=item.id,
        url=item.url,
        folder_path=folder_path,
        width=item.width,
        height=item.height,
        format=item.format,
    )


def walk(
    client,
    prefix: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    max_pages: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
) -> WalkResult:
    """
    Collects every asset under `prefix`, one page at a time.

    Args:
        client: A RemoteStoreClient.
        prefix (str): Folder prefix to list, e.g. "Templates/".
        page_size (int): Items requested per page.
        max_pages (int | None): Stop after this many pages.
        deadline_seconds (float | None): Stop once this much time has elapsed.

    Returns:
        WalkResult: The assets collected. A fetch failure does not raise; it
            ends the walk and marks the result as truncated.
    """
    result = WalkResult()
    started = time.monotonic()
    cursor: Optional[str] = None

    while True:
        if max_pages is not None and result.pages >= max_pages:
            logger.warning(
                "Stopping walk of %s after %d pages (page limit)", prefix, result.pages
            )
            result.truncated = True
            break
        if deadline_seconds is not None and time.monotonic() - started >= deadline_seconds:
            logger.warning(
                "Stopping walk of %s after %.1fs (deadline)", prefix, deadline_seconds
            )
            result.truncated = True
            break

        try:
            page = client.list_page(prefix, page_size, cursor)
        except TransientFetchError as exc:
            logger.warning(
                "Error fetching page %d of %s: %s", result.pages + 1, prefix, exc
            )
            result.truncated = True
            result.error = str(exc)
            break

        result.pages += 1
        result.assets.extend(to_remote_asset(item) for item in page.items)

        next_cursor = page.next_cursor or None
        if next_cursor is None:
            break
        if next_cursor == cursor:
            logger.warning("Remote store repeated cursor %r for %s", cursor, prefix)
            result.truncated = True
            break
        cursor = next_cursor

    logger.info(
        "Fetched %d assets from %s in %d pages%s",
        len(result.assets),
        prefix,
        result.pages,
        " (truncated)" if result.truncated else "",
    )
    return result
