"""
Error taxonomy for the asset mirror.

Each error carries the HTTP status the service answers with when it reaches
the request boundary.
"""

from __future__ import annotations


class AssetMirrorError(Exception):
    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class TransientFetchError(AssetMirrorError):
    """A remote store page could not be fetched or decoded."""

    status_code = 502


class PayloadValidationError(AssetMirrorError):
    """A required request field is missing or malformed."""

    status_code = 400


class NotFoundError(AssetMirrorError):
    """A lookup that expects at least one record matched nothing."""

    status_code = 404


class RepositoryError(AssetMirrorError):
    """A read or write against the asset repository failed."""

    status_code = 500
