"""Display names for conversations and message senders."""

from __future__ import annotations

from contracts.msgstore import ConversationKind
from waviewer.contacts.index import UNKNOWN_NAME, ContactIndex, ContactIndexHolder
from waviewer.identifiers import conversation_kind, local_part

GROUP_FALLBACK_NAME = "Group Chat"


class ContactResolver:
    """Resolve identifiers to human names through the shared contact index.

    Group conversations are titled by their stored subject only; their members
    are resolved one message at a time by the timeline builder.
    """

    def __init__(self, index_holder: ContactIndexHolder | None = None) -> None:
        self.index_holder = index_holder or ContactIndexHolder()

    def display_name_for(
        self,
        identifier: str,
        kind: ConversationKind | None = None,
        subject: str | None = None,
    ) -> str:
        """Best display name for a conversation or participant identifier.

        Args:
            identifier: Raw identifier (``local@domain``).
            kind: Conversation kind; derived from the identifier when omitted.
            subject: Stored conversation subject, used for groups.

        Returns:
            Subject or ``"Group Chat"`` for groups; contact name or the
            identifier's digits for direct conversations.
        """
        kind = kind or conversation_kind(identifier)
        match kind:
            case ConversationKind.GROUP:
                if subject and subject.strip():
                    return subject.strip()
                return GROUP_FALLBACK_NAME
            case ConversationKind.DIRECT:
                return self.current_index.resolve_by_suffix(local_part(identifier))

    def sender_name_for(self, identifier: str | None) -> str:
        """Resolve an individual message author."""
        if not identifier:
            return UNKNOWN_NAME
        return self.current_index.resolve_by_suffix(local_part(identifier))

    @property
    def current_index(self) -> ContactIndex:
        return self.index_holder.current
