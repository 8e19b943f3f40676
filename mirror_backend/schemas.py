"""
Pydantic schemas for the asset mirror API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CategoryRequest(BaseModel):
    categoryName: Optional[str] = Field(default=None, max_length=512)


class SearchFilters(BaseModel):
    category: Optional[str] = None
    format: Optional[str] = None
    minWidth: Optional[int] = None
    minHeight: Optional[int] = None
    tags: Optional[str] = None

    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]
