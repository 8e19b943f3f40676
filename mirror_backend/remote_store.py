"""
Remote asset store clients: Cloudinary, S3-compatible buckets and an in-memory
test double.

Every client lists one page at a time and raises TransientFetchError for any
transport or decoding failure so the walker can degrade gracefully.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol
import posixpath

import boto3
import requests
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from shared.constants import PATH_SEPARATOR
from shared.errors import TransientFetchError
from shared.types import RemoteItem, RemotePage

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
CLOUDINARY_MAX_RESULTS = 500
S3_MAX_KEYS = 1000

IMAGE_EXTENSIONS = {
    "avif",
    "bmp",
    "gif",
    "heic",
    "jpeg",
    "jpg",
    "png",
    "svg",
    "tif",
    "tiff",
    "webp",
}


class RemoteStoreClient(Protocol):
    """Defines the listing operations the sync engine needs from a store."""

    def list_page(
        self, prefix: str, page_size: int, cursor: Optional[str] = None
    ) -> RemotePage:
        ...

    def list_root_folders(self) -> list[str]:
        ...


@dataclass
class InMemoryRemoteStoreClient:
    """Test double serving `items` in pages; cursors are stringified offsets."""

    items: list[RemoteItem] = field(default_factory=list)
    # 1-based list_page call numbers that raise TransientFetchError.
    fail_on_calls: set[int] = field(default_factory=set)
    calls: int = 0

    def add(self, *items: RemoteItem) -> None:
        self.items.extend(items)

    def reset(self) -> None:
        self.items.clear()
        self.fail_on_calls.clear()
        self.calls = 0

    def list_page(
        self, prefix: str, page_size: int, cursor: Optional[str] = None
    ) -> RemotePage:
        self.calls += 1
        if self.calls in self.fail_on_calls:
            raise TransientFetchError(f"Simulated failure on call {self.calls}")
        matching = [item for item in self.items if item.id.startswith(prefix)]
        start = int(cursor) if cursor else 0
        end = start + page_size
        next_cursor = str(end) if end < len(matching) else None
        return RemotePage(items=matching[start:end], next_cursor=next_cursor)

    def list_root_folders(self) -> list[str]:
        folders: list[str] = []
        for item in self.items:
            if PATH_SEPARATOR in item.id:
                top = item.id.split(PATH_SEPARATOR, 1)[0]
                if top not in folders:
                    folders.append(top)
        return folders


@dataclass
class CloudinaryStoreClient:
    """
    Lists uploaded images through the Cloudinary Admin API.
    """

    cloud_name: str
    api_key: str
    api_secret: str
    timeout: float = 30.0

    def __post_init__(self):
        self._session = requests.Session()
        self._session.auth = (self.api_key, self.api_secret)

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{CLOUDINARY_API_BASE}/{self.cloud_name}/{path}"
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise TransientFetchError(f"Cloudinary request failed: {exc}") from exc
        except ValueError as exc:
            raise TransientFetchError(f"Cloudinary returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise TransientFetchError(
                f"Cloudinary returned an unexpected {type(payload).__name__} payload"
            )
        return payload

    def list_page(
        self, prefix: str, page_size: int, cursor: Optional[str] = None
    ) -> RemotePage:
        params = {
            "type": "upload",
            "prefix": prefix,
            "max_results": min(page_size, CLOUDINARY_MAX_RESULTS),
        }
        if cursor:
            params["next_cursor"] = cursor
        payload = self._get("resources/image", params=params)

        resources = payload.get("resources")
        if not isinstance(resources, list):
            resources = []
        items = []
        for resource in resources:
            if not isinstance(resource, dict):
                continue
            public_id = resource.get("public_id")
            if not public_id or not isinstance(public_id, str):
                continue
            items.append(
                RemoteItem(
                    id=public_id,
                    url=resource.get("secure_url") or resource.get("url") or "",
                    width=resource.get("width"),
                    height=resource.get("height"),
                    format=resource.get("format"),
                )
            )
        next_cursor = payload.get("next_cursor")
        if not isinstance(next_cursor, str):
            next_cursor = None
        return RemotePage(items=items, next_cursor=next_cursor)

    def list_root_folders(self) -> list[str]:
        payload = self._get("folders")
        return [
            folder.get("path") or folder.get("name")
            for folder in payload.get("folders") or []
            if isinstance(folder, dict)
        ]


@dataclass
class S3StoreClient:
    """
    Lists images in an S3-compatible bucket (Tencent COS, AWS S3, MinIO).

    Object keys map to asset ids without their extension, which becomes the
    asset format. Bucket listings carry no image dimensions.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_base_url: Optional[str] = None

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy COS requirements.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def _object_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return f"{(self.endpoint or '').rstrip('/')}/{self.bucket}/{key}"

    def _to_item(self, key: str) -> Optional[RemoteItem]:
        stem, ext = posixpath.splitext(key)
        ext = ext.lstrip(".").lower()
        if key.endswith(PATH_SEPARATOR) or ext not in IMAGE_EXTENSIONS:
            return None
        return RemoteItem(id=stem, url=self._object_url(key), format=ext)

    def list_page(
        self, prefix: str, page_size: int, cursor: Optional[str] = None
    ) -> RemotePage:
        params = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": min(page_size, S3_MAX_KEYS),
        }
        if cursor:
            params["ContinuationToken"] = cursor
        try:
            response = self._client.list_objects_v2(**params)
        except (BotoCoreError, ClientError) as exc:
            raise TransientFetchError(f"S3 listing failed: {exc}") from exc

        items = []
        for obj in response.get("Contents", []):
            item = self._to_item(obj["Key"])
            if item is not None:
                items.append(item)
        next_cursor = (
            response.get("NextContinuationToken") if response.get("IsTruncated") else None
        )
        return RemotePage(items=items, next_cursor=next_cursor)

    def list_root_folders(self) -> list[str]:
        try:
            response = self._client.list_objects_v2(
                Bucket=self.bucket, Delimiter=PATH_SEPARATOR
            )
        except (BotoCoreError, ClientError) as exc:
            raise TransientFetchError(f"S3 listing failed: {exc}") from exc
        return [
            entry["Prefix"].rstrip(PATH_SEPARATOR)
            for entry in response.get("CommonPrefixes", [])
        ]
