"""
Data types passed between the remote store, the sync engine and the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True)
class RemoteItem:
    """One entry of a remote store listing page."""

    id: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None


@dataclass
class RemotePage:
    items: list[RemoteItem] = field(default_factory=list)
    # Opaque continuation token; None means the listing is exhausted.
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class RemoteAsset:
    external_id: str
    url: str
    folder_path: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None


@dataclass
class WalkResult:
    """
    Assets discovered by a pagination walk.

    `truncated` is set when the walk stopped before the store reported the end
    of the listing (fetch failure, page limit, deadline or a repeating cursor),
    in which case `assets` holds only what was collected up to that point.
    """

    assets: list[RemoteAsset] = field(default_factory=list)
    truncated: bool = False
    pages: int = 0
    error: Optional[str] = None


@dataclass
class AssetRecord:
    name: str
    category: str
    image_url: str
    tags: list[str] = field(default_factory=list)
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    created_at: Optional[float] = None
    updated_at: Optional[float] = None

    def as_dict(self, fields: Optional[Sequence[str]] = None) -> dict:
        data = {
            "name": self.name,
            "category": self.category,
            "imageUrl": self.image_url,
            "tags": list(self.tags),
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if fields is None:
            return data
        return {key: data[key] for key in fields if key in data}


@dataclass
class AssetFilter:
    """Conjunctive filter over asset records. Unset fields match everything."""

    category: Optional[str] = None
    format: Optional[str] = None
    min_width: Optional[int] = None
    min_height: Optional[int] = None
    tags: list[str] = field(default_factory=list)

    def matches(self, record: AssetRecord) -> bool:
        if self.category is not None and record.category != self.category:
            return False
        if self.format is not None:
            if not record.format or record.format.lower() != self.format.lower():
                return False
        if self.min_width is not None:
            if record.width is None or record.width < self.min_width:
                return False
        if self.min_height is not None:
            if record.height is None or record.height < self.min_height:
                return False
        if self.tags and not set(self.tags).issubset(record.tags or []):
            return False
        return True


@dataclass
class CategoryGroup:
    name: str
    url_name: str
    records: list[AssetRecord] = field(default_factory=list)

    def as_dict(
        self,
        records_key: str = "records",
        fields: Optional[Sequence[str]] = None,
    ) -> dict:
        return {
            "name": self.name,
            "urlName": self.url_name,
            records_key: [record.as_dict(fields) for record in self.records],
        }


@dataclass
class SyncResult:
    walk: WalkResult
    committed: int = 0

    @property
    def truncated(self) -> bool:
        return self.walk.truncated


def project(records: Iterable[AssetRecord], fields: Optional[Sequence[str]]) -> list[dict]:
    return [record.as_dict(fields) for record in records]
