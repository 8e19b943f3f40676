"""
Derives display categories from remote asset paths.
"""

from __future__ import annotations

from shared.constants import PATH_SEPARATOR, ROOT_CATEGORY, URL_NAME_SEPARATOR


def split_asset_path(external_id: str) -> tuple[str, str]:
    """
    Splits a store identifier into its folder path and leaf name.

    Args:
        external_id (str): The full store identifier, e.g. "Templates/Holiday/card1".

    Returns:
        tuple[str, str]: The folder path ("Templates/Holiday") and the leaf
            ("card1"). Identifiers without a separator live in the "root" folder.
    """
    index = external_id.rfind(PATH_SEPARATOR)
    if index < 0:
        return ROOT_CATEGORY, external_id
    return external_id[:index], external_id[index + 1 :]


def normalize_root(root_folder: str) -> str:
    return (root_folder or "").rstrip(PATH_SEPARATOR)


def categorize(folder_path: str, root_folder: str) -> str:
    """
    Returns the category for an asset stored under `folder_path`.

    The leading "{root_folder}/" segment is removed and nested folders are kept
    as-is ("Templates/Holiday/Winter" -> "Holiday/Winter"). Underscores are
    folded into spaces so every stored category survives a URL-name round trip.
    Assets directly under the root map to ROOT_CATEGORY.
    """
    root = normalize_root(root_folder)
    path = folder_path or ""
    if root:
        if path == root:
            return ROOT_CATEGORY
        prefix = root + PATH_SEPARATOR
        if path.startswith(prefix):
            path = path[len(prefix) :]
    path = path.strip(PATH_SEPARATOR)
    if not path:
        return ROOT_CATEGORY
    return path.replace(URL_NAME_SEPARATOR, " ")
