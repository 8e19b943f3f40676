"""
Reconciles walked remote assets into the asset repository.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from asset_pipeline.categorizer import categorize as default_categorize
from shared.types import AssetRecord, RemoteAsset

logger = logging.getLogger(__name__)


def build_record(
    asset: RemoteAsset,
    root_folder: str,
    categorize: Callable[[str, str], str] = default_categorize,
) -> AssetRecord:
    return AssetRecord(
        name=asset.external_id,
        category=categorize(asset.folder_path, root_folder),
        image_url=asset.url,
        width=asset.width,
        height=asset.height,
        format=asset.format,
    )


def reconcile(
    repository,
    assets: Sequence[RemoteAsset],
    root_folder: str,
    categorize: Callable[[str, str], str] = default_categorize,
) -> int:
    """
    Upserts `assets` into `repository` keyed on their external id.

    Duplicate ids collapse to the last one seen. The whole batch goes to the
    repository in a single bulk call; an empty batch makes no call at all.

    Returns:
        int: The number of distinct records written.

    Raises:
        RepositoryError: If the bulk write fails.
    """
    if not assets:
        return 0

    by_name: dict[str, AssetRecord] = {}
    for asset in assets:
        by_name[asset.external_id] = build_record(asset, root_folder, categorize)

    committed = repository.bulk_upsert(list(by_name.values()))
    logger.info("Synced %d assets from %s", committed, root_folder)
    return committed
