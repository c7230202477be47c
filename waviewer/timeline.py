"""Timeline construction for a single conversation.

Turns store messages (ascending timestamp order) into renderable messages:
day separators, resolved authors, mapped delivery status and media text.
The builder keeps the input order; showing newest-first is up to the
presentation layer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta, tzinfo

from contracts.msgstore import ConversationKind, Message, RenderableMessage
from waviewer.contacts.resolver import ContactResolver
from waviewer.identifiers import conversation_kind

logger = logging.getLogger(__name__)

MEDIA_PLACEHOLDER = "[Media message]"


class TimelineBuilder:
    """Build renderable timelines, resolving senders through a ContactResolver.

    Example:
        builder = TimelineBuilder(resolver)
        timeline = builder.build(reader.list_messages(conv.id).items, conv.kind)
    """

    def __init__(self, resolver: ContactResolver, tz: tzinfo | None = None) -> None:
        """Initialize the builder.

        Args:
            resolver: Resolver used for sender names.
            tz: Zone calendar days are computed in; local time when None.
        """
        self.resolver = resolver
        self.tz = tz

    def build(
        self,
        messages: Sequence[Message],
        kind: ConversationKind | None = None,
    ) -> list[RenderableMessage]:
        """Enrich messages for display, preserving their order.

        Args:
            messages: Messages of one conversation, ascending by timestamp.
            kind: Conversation kind; derived from the first message when omitted.

        Returns:
            One RenderableMessage per input message, same order.
        """
        if not messages:
            return []

        kind = kind or conversation_kind(messages[0].conversation_participant)
        timeline: list[RenderableMessage] = []
        previous_day: date | None = None

        for message in messages:
            day = message.timestamp.local_day(self.tz)
            timeline.append(
                RenderableMessage(
                    message=message,
                    show_date_separator=previous_day is None or day != previous_day,
                    day=day,
                    sender_name=self.sender_name(message, kind),
                    delivery_status=message.delivery_status,
                    display_text=message.body or MEDIA_PLACEHOLDER,
                    caption_line=message.media.caption if message.media else None,
                )
            )
            previous_day = day

        logger.debug("Built timeline of %d messages (%s)", len(timeline), kind.value)
        return timeline

    def sender_name(self, message: Message, kind: ConversationKind) -> str | None:
        """Author to show above a message; None for outgoing messages."""
        if message.is_outgoing:
            return None
        match kind:
            case ConversationKind.DIRECT:
                return self.resolver.display_name_for(
                    message.conversation_participant, ConversationKind.DIRECT
                )
            case ConversationKind.GROUP:
                # The conversation identifier names the group, not the author
                return self.resolver.sender_name_for(message.sender_identifier)


def day_label(day: date, today: date) -> str:
    """Separator text: "Today", "Yesterday" or the ISO date."""
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return day.isoformat()
