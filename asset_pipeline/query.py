"""
Read-only queries over the mirrored asset records.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from asset_pipeline.aggregator import decode_url_name
from shared.constants import CATEGORY_FIELDS, LIST_FIELDS
from shared.errors import NotFoundError, PayloadValidationError
from shared.types import AssetFilter, project


class AssetQueryService:
    """Query façade over one asset repository. Never triggers a sync."""

    def __init__(self, repository):
        self.repository = repository

    def list_all(self, projection: Optional[Sequence[str]] = LIST_FIELDS) -> list[dict]:
        return project(self.repository.find(), projection)

    def list_by_category(
        self,
        category_name: str,
        projection: Optional[Sequence[str]] = CATEGORY_FIELDS,
    ) -> list[dict]:
        """
        Returns the records of one category given its URL-safe name.

        Raises:
            PayloadValidationError: If `category_name` is blank.
            NotFoundError: If no record belongs to the category.
        """
        if not category_name or not category_name.strip():
            raise PayloadValidationError("categoryName is required in payload")
        category = decode_url_name(category_name)
        records = self.repository.find(AssetFilter(category=category))
        if not records:
            raise NotFoundError(
                f'No assets found in category "{category}"', category=category
            )
        return project(records, projection)

    def search(
        self,
        filters: AssetFilter,
        projection: Optional[Sequence[str]] = LIST_FIELDS,
    ) -> list[dict]:
        if filters.category:
            filters = replace(filters, category=decode_url_name(filters.category))
        return project(self.repository.find(filters), projection)
