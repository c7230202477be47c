"""Convenience factory functions for common error scenarios.

Provides shorthand functions for creating commonly-used error instances
with appropriate error codes and details pre-filled.
"""

from __future__ import annotations

from collections.abc import Iterable

from waviewer.errors.base import ErrorCode
from waviewer.errors.store import (
    ContactSourceUnavailableError,
    StoreNotFoundError,
    StoreUnreadableError,
)


def store_not_found(db_path: str) -> StoreNotFoundError:
    """Create a StoreNotFoundError for a missing store file."""
    return StoreNotFoundError(
        f"Message store not found at: {db_path}",
        db_path=db_path,
    )


def store_missing_tables(db_path: str, missing: Iterable[str]) -> StoreUnreadableError:
    """Create a StoreUnreadableError for a store lacking required tables."""
    missing_tables = sorted(missing)
    return StoreUnreadableError(
        f"Message store is missing required tables: {', '.join(missing_tables)}",
        db_path=db_path,
        missing_tables=missing_tables,
        code=ErrorCode.STORE_MISSING_TABLES,
    )


def store_query_failed(db_path: str, query: str, cause: Exception) -> StoreUnreadableError:
    """Create a StoreUnreadableError wrapping a failed query."""
    return StoreUnreadableError(
        f"Message store query failed: {cause}",
        db_path=db_path,
        query=query,
        code=ErrorCode.STORE_QUERY_FAILED,
        cause=cause,
    )


def contact_source_unavailable(
    source: str, cause: Exception | None = None
) -> ContactSourceUnavailableError:
    """Create a ContactSourceUnavailableError for an unreadable address book."""
    message = f"Contact source unavailable: {source}"
    if cause is not None:
        message = f"{message} ({cause})"
    return ContactSourceUnavailableError(message, source=source, cause=cause)
