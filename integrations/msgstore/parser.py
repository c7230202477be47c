"""Row parsing utilities for msgstore.db.

Handles:
- Conversation and message row shaping
- Unit tagging of epoch timestamps
- Timestamp unit plausibility checks
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from contracts.msgstore import (
    Conversation,
    EpochTimestamp,
    MediaRef,
    Message,
    TimestampUnit,
)

logger = logging.getLogger(__name__)

# Epoch milliseconds pass this around 1973; epoch seconds will not until year 5138
_MILLIS_THRESHOLD = 100_000_000_000


def tag_timestamp(value: Any, unit: TimestampUnit) -> EpochTimestamp:
    """Wrap a raw column value with its unit. Missing or non-numeric values become 0."""
    try:
        raw = int(value) if value is not None else 0
    except (TypeError, ValueError):
        logger.debug("Non-numeric timestamp value %r, using 0", value)
        raw = 0
    return EpochTimestamp(raw, unit)


def suspect_timestamp_unit(values: Iterable[int], unit: TimestampUnit) -> TimestampUnit | None:
    """Cross-check configured units against value magnitudes.

    Args:
        values: Raw timestamps from one column (zeros are ignored).
        unit: Unit the column is configured with.

    Returns:
        The unit the values look like, if it differs from ``unit``; else None.
    """
    samples = [v for v in values if v]
    if not samples:
        return None
    looks_millis = sum(1 for v in samples if abs(v) >= _MILLIS_THRESHOLD) * 2 > len(samples)
    observed = TimestampUnit.MILLISECONDS if looks_millis else TimestampUnit.SECONDS
    return observed if observed is not unit else None


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def parse_conversation_row(row: Mapping[str, Any], unit: TimestampUnit) -> Conversation:
    """Shape one conversations-query row.

    Args:
        row: Row with raw_identifier, subject, created_timestamp,
            last_message_row_id and chat_row_id keys.
        unit: Unit of ``created_timestamp``.
    """
    return Conversation(
        id=str(row["raw_identifier"]),
        subject_override=_optional_text(row.get("subject")),
        created_at=tag_timestamp(row.get("created_timestamp"), unit),
        last_message_ref=_optional_int(row.get("last_message_row_id")),
        row_id=_optional_int(row.get("chat_row_id")),
    )


def parse_media(row: Mapping[str, Any]) -> MediaRef | None:
    """Media for a message row, or None when the left join found no media row."""
    if row.get("media_row_ref") is None and row.get("media_path") is None:
        return None
    return MediaRef(
        path=_optional_text(row.get("media_path")),
        caption=_optional_text(row.get("media_caption")),
    )


def parse_message_row(row: Mapping[str, Any], unit: TimestampUnit) -> Message:
    """Shape one messages-query row.

    Args:
        row: Row from the messages query.
        unit: Unit of ``message.timestamp``.
    """
    return Message(
        id=int(row["id"]),
        conversation_participant=str(row.get("raw_identifier") or ""),
        is_outgoing=bool(row.get("from_me")),
        external_key=str(row.get("key_id") or ""),
        status_code=_optional_int(row.get("status")),
        body=str(row.get("body") or ""),
        timestamp=tag_timestamp(row.get("timestamp"), unit),
        media=parse_media(row),
        sender_participant_ref=_optional_int(row.get("sender_row_ref")),
        sender_identifier=_optional_text(row.get("sender_identifier")),
    )
