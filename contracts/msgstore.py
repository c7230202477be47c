"""Message store interfaces.

Shared value types for the msgstore reader, the contact index and the
timeline/conversation-list builders, plus the Protocols that surrounding
components (store providers, contact sources) implement.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from enum import StrEnum
from typing import Any, Generic, Protocol, TypeVar

from waviewer.errors import ContactSourceError, ErrorCode, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Domain suffix marking a multi-user conversation
GROUP_IDENTIFIER_SUFFIX = "@g.us"

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class ConversationKind(StrEnum):
    """Whether a conversation identifier denotes one peer or a group."""

    DIRECT = "direct"
    GROUP = "group"

    @classmethod
    def of(cls, identifier: str | None) -> ConversationKind:
        """Classify an identifier by substring containment of the group suffix."""
        if identifier and GROUP_IDENTIFIER_SUFFIX in identifier:
            return cls.GROUP
        return cls.DIRECT


class TimestampUnit(StrEnum):
    """Unit a store column counts epoch time in."""

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    @property
    def per_second(self) -> int:
        return 1 if self is TimestampUnit.SECONDS else 1000


@dataclass(frozen=True, order=True)
class EpochTimestamp:
    """Unit-tagged epoch timestamp as read from a store column.

    Attributes:
        value: Raw integer from the column.
        unit: Unit the column is known to use.
    """

    value: int
    unit: TimestampUnit = TimestampUnit.MILLISECONDS

    def to_millis(self) -> int:
        return self.value * (1000 // self.unit.per_second)

    def to_datetime(self, tz: tzinfo | None = None) -> datetime:
        """Convert to an aware datetime, in local time unless ``tz`` is given.

        Out-of-range values fall back to the Unix epoch instead of raising.
        """
        seconds = self.value / self.unit.per_second
        try:
            if tz is None:
                return datetime.fromtimestamp(seconds).astimezone()
            return datetime.fromtimestamp(seconds, tz=tz)
        except (ValueError, OSError, OverflowError) as e:
            logger.debug("Failed to convert timestamp %s (%s): %s", self.value, self.unit, e)
            return UNIX_EPOCH if tz is None else UNIX_EPOCH.astimezone(tz)

    def local_day(self, tz: tzinfo | None = None) -> date:
        """Calendar day (year, month, day) of this instant."""
        return self.to_datetime(tz).date()


class DeliveryStatus(StrEnum):
    """Delivery state of an outgoing message."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: int | None) -> DeliveryStatus:
        """Map a numeric status column value. Total: unknown codes map to UNKNOWN."""
        if code is None or isinstance(code, bool):
            return cls.UNKNOWN
        return _STATUS_CODES.get(code, cls.UNKNOWN)


_STATUS_CODES: dict[int, DeliveryStatus] = {
    0: DeliveryStatus.PENDING,
    1: DeliveryStatus.SENT,
    2: DeliveryStatus.DELIVERED,
    3: DeliveryStatus.READ,
}


@dataclass(frozen=True)
class ContactRecord:
    """One address book entry as supplied by a contact source.

    Attributes:
        name: Display name.
        phone_numbers: Raw phone number strings, any formatting.
    """

    name: str
    phone_numbers: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ContactRecord:
        """Build from ``{"name": ..., "phoneNumbers": [...]}`` style dicts.

        Raises:
            ContactSourceError: If the phone numbers are neither a string nor a list.
        """
        name = str(data.get("name") or "")
        numbers = data.get("phoneNumbers", data.get("phone_numbers"))
        return cls(name=name, phone_numbers=phone_numbers_from(numbers, name))


def phone_numbers_from(value: Any, name: str = "") -> tuple[str, ...]:
    """Collect phone number strings from an exported contact's number field.

    Accepts a single string or a list of entries. An entry is either a string
    or an object carrying a ``"number"`` key, as phone-book exports write
    them; other entries are skipped.

    Raises:
        ContactSourceError: If ``value`` is neither a string nor a list.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list | tuple):
        raise ContactSourceError(
            f"Phone numbers for {name!r} must be a string or a list, "
            f"got {type(value).__name__}",
            code=ErrorCode.CNT_SOURCE_INVALID,
            details={"contact": name},
        )

    numbers: list[str] = []
    for entry in value:
        if isinstance(entry, Mapping):
            entry = entry.get("number")
        if isinstance(entry, str):
            numbers.append(entry)
        elif entry is not None:
            logger.debug("Skipping phone entry of type %s for %r", type(entry).__name__, name)
    return tuple(numbers)


@dataclass(frozen=True)
class Conversation:
    """One row of the conversation listing.

    Attributes:
        id: Participant or group identifier (``jid.raw_string``).
        subject_override: Stored subject, None when absent or blank.
        created_at: Creation time, unit-tagged.
        last_message_ref: Row id of the last message, if recorded.
        row_id: ``chat._id`` in the source store.
    """

    id: str
    subject_override: str | None
    created_at: EpochTimestamp
    last_message_ref: int | None = None
    row_id: int | None = None

    @property
    def kind(self) -> ConversationKind:
        return ConversationKind.of(self.id)

    @property
    def is_group(self) -> bool:
        return self.kind is ConversationKind.GROUP


@dataclass(frozen=True)
class MediaRef:
    """Media attached to a message (one-to-zero-or-one)."""

    path: str | None
    caption: str | None = None


@dataclass(frozen=True)
class Message:
    """One message row, joined with its conversation identifier.

    Attributes:
        id: ``message._id``.
        conversation_participant: Identifier of the conversation the message is in.
        is_outgoing: Sent by the store owner.
        external_key: ``message.key_id``.
        status_code: Raw delivery status column.
        body: Text body, empty string when the store has none.
        timestamp: Send/receive time, unit-tagged.
        media: Attached media, None when the message has none.
        sender_participant_ref: ``message.sender_jid_row_id``; group messages only.
        sender_identifier: Raw identifier the sender reference points at.
    """

    id: int
    conversation_participant: str
    is_outgoing: bool
    external_key: str
    status_code: int | None
    body: str
    timestamp: EpochTimestamp
    media: MediaRef | None = None
    sender_participant_ref: int | None = None
    sender_identifier: str | None = None

    @property
    def delivery_status(self) -> DeliveryStatus:
        return DeliveryStatus.from_code(self.status_code)


@dataclass(frozen=True)
class RenderableMessage:
    """A message enriched for display.

    Attributes:
        message: The underlying store message.
        show_date_separator: First message of a calendar day.
        day: Local calendar day of the message.
        sender_name: Resolved author, None for outgoing messages.
        delivery_status: Mapped status.
        display_text: Body, or the media placeholder when the body is empty.
        caption_line: Media caption, only when present.
    """

    message: Message
    show_date_separator: bool
    day: date
    sender_name: str | None
    delivery_status: DeliveryStatus
    display_text: str
    caption_line: str | None = None


@dataclass(frozen=True)
class DisplayConversation:
    """A conversation with its resolved display name."""

    conversation: Conversation
    display_name: str

    @property
    def id(self) -> str:
        return self.conversation.id

    @property
    def kind(self) -> ConversationKind:
        return self.conversation.kind


@dataclass
class QueryResult(Generic[T]):
    """Outcome of a store query.

    An empty ``items`` with no ``error`` is a valid empty result; a set
    ``error`` means the store could not be read and ``items`` is empty.
    """

    items: list[T] = field(default_factory=list)
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.items


class StoreReader(Protocol):
    """Read-only access to a message store."""

    def check_access(self) -> bool:
        """Check that the store can be opened and has the required tables."""
        ...

    def list_conversations(self) -> QueryResult[Conversation]:
        """Conversations in descending recency order."""
        ...

    def list_messages(self, conversation_id: str) -> QueryResult[Message]:
        """Messages of one conversation in ascending timestamp order."""
        ...


class ContactSource(Protocol):
    """Point-in-time address book snapshot provider."""

    def fetch(self) -> list[ContactRecord]:
        """Return all contacts.

        Raises:
            ContactSourceUnavailableError: If the address book cannot be read.
        """
        ...
