"""
Backend package for the asset mirror API.

This package provides a FastAPI application that mirrors image assets from a
remote store (Cloudinary or an S3-compatible bucket) into a local database and
serves category and search queries against that mirror.
"""
