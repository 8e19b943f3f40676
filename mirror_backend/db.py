"""
Asset repositories backed by SQLAlchemy and an in-memory test implementation.

Each asset type (templates, stickers) gets its own repository; records are
keyed by their store identifier (`name`) within that asset type.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import Dict, Optional, Protocol, Sequence

from sqlalchemy import JSON, Column, Float, Integer, String, create_engine, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from shared.errors import RepositoryError
from shared.types import AssetFilter, AssetRecord


class AssetRepository(Protocol):
    """
    Persistent store of reconciled asset records for one asset type.

    `bulk_upsert` inserts absent records and, for existing ones, overwrites the
    derived fields (category, image_url, width, height, format) while keeping
    their tags and creation time. Each key is written atomically.
    """

    def bulk_upsert(self, records: Sequence[AssetRecord]) -> int:
        ...

    def find(self, asset_filter: Optional[AssetFilter] = None) -> list[AssetRecord]:
        ...


class DbClient(Protocol):
    """Hands out the repository for an asset type."""

    def repository(self, asset_type: str) -> AssetRepository:
        ...


def _collapse(records: Sequence[AssetRecord]) -> Dict[str, AssetRecord]:
    by_name: Dict[str, AssetRecord] = {}
    for record in records:
        by_name[record.name] = record
    return by_name


class InMemoryAssetRepository:
    """Simple in-memory repository for development and tests."""

    def __init__(self):
        self.records: Dict[str, AssetRecord] = {}
        self._lock = threading.Lock()

    def bulk_upsert(self, records: Sequence[AssetRecord]) -> int:
        now = time.time()
        collapsed = _collapse(records)
        with self._lock:
            for name, record in collapsed.items():
                existing = self.records.get(name)
                if existing:
                    existing.category = record.category
                    existing.image_url = record.image_url
                    existing.width = record.width
                    existing.height = record.height
                    existing.format = record.format
                    existing.updated_at = now
                else:
                    self.records[name] = replace(
                        record, tags=list(record.tags), created_at=now, updated_at=now
                    )
        return len(collapsed)

    def find(self, asset_filter: Optional[AssetFilter] = None) -> list[AssetRecord]:
        asset_filter = asset_filter or AssetFilter()
        with self._lock:
            return [
                replace(record, tags=list(record.tags))
                for record in self.records.values()
                if asset_filter.matches(record)
            ]


class InMemoryDbClient:
    def __init__(self):
        self.repositories: Dict[str, InMemoryAssetRepository] = {}
        self._lock = threading.Lock()

    def repository(self, asset_type: str) -> InMemoryAssetRepository:
        with self._lock:
            if asset_type not in self.repositories:
                self.repositories[asset_type] = InMemoryAssetRepository()
            return self.repositories[asset_type]

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.repositories.clear()


# Dialects with a native INSERT ... ON CONFLICT DO UPDATE.
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

# Tags and created_at are never overwritten by a sync.
UPSERT_UPDATED_COLUMNS = ("category", "image_url", "width", "height", "format", "updated_at")

# Keeps each multi-row INSERT under SQLite's bound-parameter limit.
UPSERT_CHUNK_SIZE = 90


class SqlAssetRepository:
    def __init__(self, session_factory: sessionmaker, asset_type: str):
        self.Session = session_factory
        self.asset_type = asset_type

    def _to_record(self, row: "AssetRow") -> AssetRecord:
        return AssetRecord(
            name=row.name,
            category=row.category,
            image_url=row.image_url,
            tags=list(row.tags or []),
            width=row.width,
            height=row.height,
            format=row.format,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _row_values(self, record: AssetRecord, now: float) -> dict:
        return {
            "asset_type": self.asset_type,
            "name": record.name,
            "category": record.category,
            "image_url": record.image_url,
            "tags": list(record.tags),
            "width": record.width,
            "height": record.height,
            "format": record.format,
            "created_at": now,
            "updated_at": now,
        }

    def _upsert_on_conflict(self, session: Session, insert, rows: list[dict]) -> None:
        for start in range(0, len(rows), UPSERT_CHUNK_SIZE):
            stmt = insert(AssetRow).values(rows[start : start + UPSERT_CHUNK_SIZE])
            stmt = stmt.on_conflict_do_update(
                index_elements=[AssetRow.asset_type, AssetRow.name],
                set_={column: stmt.excluded[column] for column in UPSERT_UPDATED_COLUMNS},
            )
            session.execute(stmt)

    def _upsert_by_lookup(self, session: Session, rows: list[dict]) -> None:
        # Other dialects: not atomic against a concurrent insert of the same key.
        stmt = select(AssetRow).where(
            AssetRow.asset_type == self.asset_type,
            AssetRow.name.in_([row["name"] for row in rows]),
        )
        existing = {row.name: row for row in session.execute(stmt).scalars()}
        for values in rows:
            row = existing.get(values["name"])
            if row:
                row.category = values["category"]
                row.image_url = values["image_url"]
                row.width = values["width"]
                row.height = values["height"]
                row.format = values["format"]
                row.updated_at = values["updated_at"]
            else:
                session.add(AssetRow(**values))

    def bulk_upsert(self, records: Sequence[AssetRecord]) -> int:
        collapsed = _collapse(records)
        if not collapsed:
            return 0
        now = time.time()
        rows = [self._row_values(record, now) for record in collapsed.values()]
        with self.Session() as session:
            try:
                insert = UPSERT_INSERTS.get(session.get_bind().dialect.name)
                if insert is not None:
                    self._upsert_on_conflict(session, insert, rows)
                else:
                    self._upsert_by_lookup(session, rows)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise RepositoryError(f"Error saving {self.asset_type} to DB: {exc}") from exc
        return len(collapsed)

    def find(self, asset_filter: Optional[AssetFilter] = None) -> list[AssetRecord]:
        asset_filter = asset_filter or AssetFilter()
        stmt = select(AssetRow).where(AssetRow.asset_type == self.asset_type)
        if asset_filter.category is not None:
            stmt = stmt.where(AssetRow.category == asset_filter.category)
        if asset_filter.format is not None:
            stmt = stmt.where(func.lower(AssetRow.format) == asset_filter.format.lower())
        if asset_filter.min_width is not None:
            stmt = stmt.where(AssetRow.width >= asset_filter.min_width)
        if asset_filter.min_height is not None:
            stmt = stmt.where(AssetRow.height >= asset_filter.min_height)
        stmt = stmt.order_by(AssetRow.created_at.asc(), AssetRow.name.asc())

        with self.Session() as session:
            try:
                rows = session.execute(stmt).scalars().all()
            except SQLAlchemyError as exc:
                raise RepositoryError(f"Error reading {self.asset_type} from DB: {exc}") from exc
            records = [self._to_record(row) for row in rows]
        # JSON columns have no portable containment operator; tags are matched here.
        return [record for record in records if asset_filter.matches(record)]


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)
        self._repositories: Dict[str, SqlAssetRepository] = {}

    def repository(self, asset_type: str) -> SqlAssetRepository:
        if asset_type not in self._repositories:
            self._repositories[asset_type] = SqlAssetRepository(self.Session, asset_type)
        return self._repositories[asset_type]


Base = declarative_base()


class AssetRow(Base):
    __tablename__ = "assets"

    asset_type = Column(String, primary_key=True)
    name = Column(String, primary_key=True)
    category = Column(String, nullable=False, index=True)
    image_url = Column(String, nullable=False)
    tags = Column(JSON, nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    format = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)
