"""
HTTP routes for the asset mirror API.

Every asset type gets the same set of endpoints under its own prefix
(`/templates/...`, `/stickers/...`).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from asset_pipeline.aggregator import decode_url_name
from asset_pipeline.engine import ASSET_TYPES, AssetType
from mirror_backend.config import Settings, get_settings
from mirror_backend.db import DbClient
from mirror_backend.dependencies import (
    build_query_service,
    build_sync_engine,
    get_db_client,
    get_remote_client,
)
from mirror_backend.remote_store import RemoteStoreClient
from mirror_backend.schemas import CategoryRequest, SearchFilters
from shared.constants import GROUP_FIELDS
from shared.types import AssetFilter

logger = logging.getLogger(__name__)

router = APIRouter()


def _sync_message(asset_type: AssetType, fetched: int, truncated: bool, error: str | None) -> str:
    key = asset_type.records_key
    if truncated:
        reason = f": {error}" if error else ""
        return f"Partial sync of {key}, the remote listing was cut short{reason}"
    if not fetched:
        return f"No {key} fetched from the remote store. Check credentials or folder name."
    return f"{key.capitalize()} fetched successfully"


def build_asset_router(asset_type: AssetType) -> APIRouter:
    key = asset_type.records_key
    asset_router = APIRouter(prefix=f"/{asset_type.name}", tags=[asset_type.name])

    @asset_router.get("/categories")
    def list_categories(
        remote: RemoteStoreClient = Depends(get_remote_client),
        db: DbClient = Depends(get_db_client),
        settings: Settings = Depends(get_settings),
    ):
        """
        Sync the remote folder into the repository, then return every record
        grouped by category.
        """
        engine = build_sync_engine(asset_type, remote, db, settings)
        result, groups, total = engine.sync_categories()
        return {
            "success": True,
            "totalCategories": len(groups),
            "totalImages": total,
            "categories": {
                name: group.as_dict(key, GROUP_FIELDS) for name, group in groups.items()
            },
            "synced": result.committed,
            "truncated": result.truncated,
            "message": _sync_message(
                asset_type, len(result.walk.assets), result.truncated, result.walk.error
            ),
        }

    @asset_router.post("/category")
    def get_category(payload: CategoryRequest, db: DbClient = Depends(get_db_client)):
        service = build_query_service(asset_type, db)
        records = service.list_by_category(payload.categoryName or "")
        return {
            "success": True,
            "category": decode_url_name(payload.categoryName),
            "count": len(records),
            key: records,
        }

    @asset_router.get("/search")
    def search(
        filters: SearchFilters = Depends(),
        db: DbClient = Depends(get_db_client),
    ):
        service = build_query_service(asset_type, db)
        records = service.search(
            AssetFilter(
                category=filters.category or None,
                format=filters.format or None,
                min_width=filters.minWidth,
                min_height=filters.minHeight,
                tags=filters.tag_list(),
            )
        )
        return {
            "success": True,
            "filters": filters.model_dump(),
            "count": len(records),
            key: records,
        }

    @asset_router.get("/all")
    def list_all(db: DbClient = Depends(get_db_client)):
        records = build_query_service(asset_type, db).list_all()
        return {"success": True, "count": len(records), key: records}

    return asset_router


for _asset_type in ASSET_TYPES.values():
    router.include_router(build_asset_router(_asset_type))
