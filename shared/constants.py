"""
Constants shared by the sync engine and the HTTP service.
"""

PATH_SEPARATOR = "/"

# Category assigned to assets that sit directly under an asset type's root folder.
ROOT_CATEGORY = "root"

URL_NAME_SEPARATOR = "_"

DEFAULT_PAGE_SIZE = 500

# Field projections used by the read endpoints.
GROUP_FIELDS = ("name", "category", "imageUrl")
CATEGORY_FIELDS = ("name", "imageUrl", "width", "height", "format")
LIST_FIELDS = ("name", "category", "imageUrl", "width", "height", "format")
