"""Exception hierarchy for waviewer.

Exception Hierarchy:
    WaviewerError (base)
    +-- ConfigurationError - Configuration and settings issues
    +-- StoreError - Message store access issues
    |   +-- StoreNotFoundError - Store file does not exist
    |   +-- StoreUnreadableError - Store cannot be queried
    +-- ContactSourceError - Address book issues
        +-- ContactSourceUnavailableError - Address book could not be fetched

An empty query result is not an error; see ``contracts.msgstore.QueryResult``.

Usage:
    from waviewer.errors import StoreError

    result = reader.list_conversations()
    if result.error is not None:
        logger.error("Store error: %s (code: %s)", result.error.message, result.error.code)
"""

# --- base ---
from waviewer.errors.base import (
    ConfigurationError,
    ErrorCode,
    WaviewerError,
)

# --- convenience factories ---
from waviewer.errors.factories import (
    contact_source_unavailable,
    store_missing_tables,
    store_not_found,
    store_query_failed,
)

# --- store & contacts ---
from waviewer.errors.store import (
    ContactSourceError,
    ContactSourceUnavailableError,
    StoreError,
    StoreNotFoundError,
    StoreUnreadableError,
)

__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "WaviewerError",
    # Configuration errors
    "ConfigurationError",
    # Store errors
    "StoreError",
    "StoreNotFoundError",
    "StoreUnreadableError",
    # Contact source errors
    "ContactSourceError",
    "ContactSourceUnavailableError",
    # Convenience functions
    "store_not_found",
    "store_missing_tables",
    "store_query_failed",
    "contact_source_unavailable",
]
