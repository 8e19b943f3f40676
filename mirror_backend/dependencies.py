"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from asset_pipeline.engine import AssetSyncEngine, AssetType
from asset_pipeline.query import AssetQueryService
from mirror_backend.config import Settings, get_settings
from mirror_backend.db import DbClient, InMemoryDbClient, SqlDbClient
from mirror_backend.remote_store import (
    CloudinaryStoreClient,
    InMemoryRemoteStoreClient,
    RemoteStoreClient,
    S3StoreClient,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_remote_client: RemoteStoreClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so mirrored records persist across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def build_remote_client(settings: Settings) -> RemoteStoreClient:
    if settings.use_in_memory_backends:
        return InMemoryRemoteStoreClient()

    if settings.remote_store == "s3":
        if not settings.cos_bucket:
            logger.warning("COS_BUCKET is not set; using an empty in-memory asset store")
            return InMemoryRemoteStoreClient()
        return S3StoreClient(
            bucket=settings.cos_bucket,
            region=settings.cos_region or "",
            endpoint=settings.cos_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.s3_public_base_url,
        )

    if not settings.cloudinary_configured:
        logger.warning(
            "Cloudinary credentials missing. Please set CLOUDINARY_CLOUD_NAME, "
            "CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET. Using an empty in-memory asset store."
        )
        return InMemoryRemoteStoreClient()
    return CloudinaryStoreClient(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout=settings.remote_request_timeout,
    )


def get_remote_client() -> RemoteStoreClient:
    global _remote_client
    if _remote_client:
        return _remote_client
    _remote_client = build_remote_client(get_settings())
    return _remote_client


def build_sync_engine(
    asset_type: AssetType,
    remote: RemoteStoreClient,
    db: DbClient,
    settings: Settings,
) -> AssetSyncEngine:
    return AssetSyncEngine(
        asset_type,
        remote,
        db.repository(asset_type.name),
        page_size=settings.sync_page_size,
        max_pages=settings.sync_max_pages,
        deadline_seconds=settings.sync_deadline_seconds,
    )


def build_query_service(asset_type: AssetType, db: DbClient) -> AssetQueryService:
    return AssetQueryService(db.repository(asset_type.name))
