"""Shared helpers: HTTP, retry, logging, datetime, and symbol parsing.

Submodules are imported directly (``from utils.http import ...``) so that the
data layer can depend on ``utils.datetime_utils`` without pulling in the HTTP
helpers, which themselves depend on ``data.base``.
"""
