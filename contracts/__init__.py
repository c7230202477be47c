"""Contract interfaces for waviewer.

This module exports the shared value types and Protocol interfaces used by
the store reader, contact sources and the timeline/conversation builders.
All implementations should code against these contracts, not concrete implementations.
"""

from contracts.msgstore import (
    GROUP_IDENTIFIER_SUFFIX,
    ContactRecord,
    ContactSource,
    Conversation,
    ConversationKind,
    DeliveryStatus,
    DisplayConversation,
    EpochTimestamp,
    MediaRef,
    Message,
    QueryResult,
    RenderableMessage,
    StoreReader,
    TimestampUnit,
)

__all__ = [
    # Message store (msgstore.db)
    "GROUP_IDENTIFIER_SUFFIX",
    "ContactRecord",
    "ContactSource",
    "Conversation",
    "ConversationKind",
    "DeliveryStatus",
    "DisplayConversation",
    "EpochTimestamp",
    "MediaRef",
    "Message",
    "QueryResult",
    "RenderableMessage",
    "StoreReader",
    "TimestampUnit",
]
