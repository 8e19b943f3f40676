"""
Groups asset records into categories for display.
"""

from __future__ import annotations

from typing import Iterable

from shared.constants import ROOT_CATEGORY, URL_NAME_SEPARATOR
from shared.types import AssetRecord, CategoryGroup


def encode_url_name(category: str) -> str:
    return category.replace(" ", URL_NAME_SEPARATOR)


def decode_url_name(url_name: str) -> str:
    return url_name.replace(URL_NAME_SEPARATOR, " ")


def aggregate(records: Iterable[AssetRecord]) -> dict[str, CategoryGroup]:
    """
    Folds records into groups keyed by their exact category string.

    Groups appear in the order their category is first seen.
    """
    groups: dict[str, CategoryGroup] = {}
    for record in records:
        name = record.category or ROOT_CATEGORY
        group = groups.get(name)
        if group is None:
            group = CategoryGroup(name=name, url_name=encode_url_name(name))
            groups[name] = group
        group.records.append(record)
    return groups
