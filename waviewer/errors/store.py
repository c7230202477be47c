"""Message store and contact source errors."""

from __future__ import annotations

from typing import Any

from waviewer.errors.base import ErrorCode, WaviewerError

# Message Store Errors


class StoreError(WaviewerError):
    """Base class for message store errors."""

    default_message = "Message store error"
    default_code = ErrorCode.STORE_UNREADABLE

    def __init__(
        self,
        message: str | None = None,
        *,
        db_path: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if db_path:
            details["db_path"] = db_path
        super().__init__(message, code=code, details=details, cause=cause)


class StoreNotFoundError(StoreError):
    """Raised when the store file does not exist."""

    default_message = "Message store not found"
    default_code = ErrorCode.STORE_NOT_FOUND


class StoreUnreadableError(StoreError):
    """Raised when a store query cannot run (missing tables/columns, corrupt file)."""

    default_message = "Message store is unreadable"
    default_code = ErrorCode.STORE_UNREADABLE

    def __init__(
        self,
        message: str | None = None,
        *,
        query: str | None = None,
        missing_tables: list[str] | None = None,
        db_path: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if query is not None:
            details["query_preview"] = query[:200] + "..." if len(query) > 200 else query
        if missing_tables:
            details["missing_tables"] = list(missing_tables)
        super().__init__(message, db_path=db_path, code=code, details=details, cause=cause)


# Contact Source Errors


class ContactSourceError(WaviewerError):
    """Base class for contact source errors."""

    default_message = "Contact source error"
    default_code = ErrorCode.CNT_SOURCE_INVALID

    def __init__(
        self,
        message: str | None = None,
        *,
        source: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, code=code, details=details, cause=cause)


class ContactSourceUnavailableError(ContactSourceError):
    """Raised when the address book cannot be fetched."""

    default_message = "Contact source unavailable"
    default_code = ErrorCode.CNT_SOURCE_UNAVAILABLE
