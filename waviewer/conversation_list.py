"""Top-level conversation listing with resolved names and filtering."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from contracts.msgstore import Conversation, DisplayConversation
from waviewer.contacts.resolver import ContactResolver

logger = logging.getLogger(__name__)


class ConversationListAggregator:
    """Attach display names to store conversations and filter them.

    The unfiltered list is the canonical one; every filter is computed from
    it, so filtering and clearing the filter any number of times loses nothing.
    """

    def __init__(self, resolver: ContactResolver) -> None:
        self.resolver = resolver

    def build(
        self,
        conversations: Sequence[Conversation],
        filter_term: str | None = None,
    ) -> list[DisplayConversation]:
        """Resolve names, keeping the store's recency order.

        Args:
            conversations: Conversations as returned by the reader.
            filter_term: Optional case-insensitive substring of the display name.

        Returns:
            De-duplicated display conversations, optionally filtered.
        """
        seen: set[str] = set()
        display: list[DisplayConversation] = []
        for conversation in conversations:
            if conversation.id in seen:
                logger.debug("Dropping duplicate conversation %s", conversation.id)
                continue
            seen.add(conversation.id)
            display.append(
                DisplayConversation(
                    conversation=conversation,
                    display_name=self.resolver.display_name_for(
                        conversation.id, conversation.kind, conversation.subject_override
                    ),
                )
            )
        return filter_conversations(display, filter_term)


def filter_conversations(
    conversations: Sequence[DisplayConversation], filter_term: str | None
) -> list[DisplayConversation]:
    """Case-insensitive substring filter on display names.

    An empty or blank term means no filter and returns the whole list.
    The input is never modified.
    """
    term = (filter_term or "").strip().casefold()
    if not term:
        return list(conversations)
    return [c for c in conversations if term in c.display_name.casefold()]
