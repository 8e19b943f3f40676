"""
Synchronization engine shared by every asset type.

An asset type names a root folder in the remote store and a collection in the
repository; the same walk -> reconcile -> aggregate pipeline runs for each.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from asset_pipeline.aggregator import aggregate
from asset_pipeline.categorizer import categorize, normalize_root
from asset_pipeline.reconciler import reconcile
from asset_pipeline.walker import walk
from shared.constants import DEFAULT_PAGE_SIZE, PATH_SEPARATOR
from shared.types import AssetRecord, CategoryGroup, SyncResult


@dataclass(frozen=True)
class AssetType:
    name: str
    root_folder: str
    # Key under which records are listed in responses, e.g. "templates".
    records_key: str
    categorize: Callable[[str, str], str] = field(default=categorize, compare=False)

    @property
    def prefix(self) -> str:
        return normalize_root(self.root_folder) + PATH_SEPARATOR


TEMPLATES = AssetType(name="templates", root_folder="Templates", records_key="templates")
STICKERS = AssetType(name="stickers", root_folder="Stickers", records_key="stickers")

ASSET_TYPES: dict[str, AssetType] = {
    TEMPLATES.name: TEMPLATES,
    STICKERS.name: STICKERS,
}


class AssetSyncEngine:
    def __init__(
        self,
        asset_type: AssetType,
        remote,
        repository,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ):
        self.asset_type = asset_type
        self.remote = remote
        self.repository = repository
        self.page_size = page_size
        self.max_pages = max_pages
        self.deadline_seconds = deadline_seconds

    def sync(self) -> SyncResult:
        """Mirrors the asset type's remote folder into the repository."""
        walk_result = walk(
            self.remote,
            self.asset_type.prefix,
            self.page_size,
            max_pages=self.max_pages,
            deadline_seconds=self.deadline_seconds,
        )
        committed = reconcile(
            self.repository,
            walk_result.assets,
            self.asset_type.root_folder,
            self.asset_type.categorize,
        )
        return SyncResult(walk=walk_result, committed=committed)

    def sync_categories(self) -> tuple[SyncResult, dict[str, CategoryGroup], int]:
        result = self.sync()
        records: list[AssetRecord] = self.repository.find()
        return result, aggregate(records), len(records)
