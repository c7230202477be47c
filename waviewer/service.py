"""Caller-facing chat history operations.

The presentation layer talks to this module only:

    service = ChatHistoryService()
    service.load_contacts(JsonContactSource("contacts.json"))
    if service.import_store("msgstore.db"):
        for conv in service.list_conversations():
            timeline = service.list_messages(conv.id)

Store failures never raise from here. ``import_store`` returns False and
``last_error`` holds the reason; the list operations return empty lists.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from contracts.msgstore import (
    ContactSource,
    Conversation,
    DisplayConversation,
    RenderableMessage,
    StoreReader,
)
from integrations.msgstore import MsgStoreReader
from waviewer.config import WaviewerConfig, get_config, validate_path
from waviewer.contacts import ContactIndexHolder, ContactResolver
from waviewer.conversation_list import ConversationListAggregator
from waviewer.errors import (
    ContactSourceError,
    StoreError,
    StoreUnreadableError,
    WaviewerError,
)
from waviewer.identifiers import conversation_kind
from waviewer.timeline import TimelineBuilder

logger = logging.getLogger(__name__)


class ChatHistoryService:
    """Import a message store and serve resolved conversations and timelines.

    Thread Safety:
        ``list_messages`` calls may run concurrently. Contact reloads publish a
        whole new index; imports replace the reader and conversation list
        under a lock.
    """

    def __init__(
        self,
        config: WaviewerConfig | None = None,
        index_holder: ContactIndexHolder | None = None,
    ) -> None:
        self.config = config or get_config()
        self.index_holder = index_holder or ContactIndexHolder()
        self.resolver = ContactResolver(self.index_holder)
        self.timeline_builder = TimelineBuilder(self.resolver)
        self.aggregator = ConversationListAggregator(self.resolver)
        self._reader: StoreReader | None = None
        self._conversations: list[Conversation] = []
        self._last_error: WaviewerError | None = None
        self._lock = threading.Lock()

    @property
    def last_error(self) -> WaviewerError | None:
        """Most recent reported condition (store or contact source)."""
        return self._last_error

    @property
    def is_loaded(self) -> bool:
        return self._reader is not None

    @property
    def has_data(self) -> bool:
        """False for an imported store without conversations ("no data" state)."""
        return bool(self._conversations)

    def import_store(self, path: Path | str | StoreReader) -> bool:
        """Open a store, validate it and load its conversation list.

        Args:
            path: Path to msgstore.db, or an already constructed reader.

        Returns:
            True if the store was loaded (possibly with zero conversations).
        """
        try:
            reader = self._open_reader(path)
            conversations = reader.list_conversations()
        except ValueError as e:
            return self._import_failed(StoreUnreadableError(str(e), cause=e))
        except StoreError as e:
            return self._import_failed(e)

        if conversations.error is not None:
            return self._import_failed(conversations.error)

        with self._lock:
            self._reader = reader
            self._conversations = list(conversations.items)
            self._last_error = None

        if conversations.is_empty:
            logger.info("Imported message store has no conversations")
        else:
            logger.info("Imported message store with %d conversations", len(conversations.items))
        return True

    def _open_reader(self, path: Path | str | StoreReader) -> StoreReader:
        if not isinstance(path, (str, Path)):
            if not path.check_access():
                raise StoreUnreadableError("Message store is not accessible")
            return path
        reader = MsgStoreReader(validate_path(path, "message store path"), self.config)
        reader.validate()
        return reader

    def _import_failed(self, error: StoreError) -> bool:
        logger.error("Error loading message store: %s", error)
        self._last_error = error
        return False

    def load_contacts(self, source: ContactSource) -> bool:
        """Fetch a contact snapshot and rebuild the contact index.

        When the source fails the index is cleared, names fall back to
        digits, and the error is kept in ``last_error``.

        Returns:
            True if the index was rebuilt from the source.
        """
        try:
            contacts = source.fetch()
            index = self.index_holder.rebuild(contacts)
        except ContactSourceError as e:
            logger.warning("Contact source unavailable, using number fallback: %s", e)
            self._last_error = e
            self.index_holder.clear()
            return False

        logger.info("Contact index rebuilt with %d numbers", len(index))
        return True

    def list_conversations(self, filter_term: str | None = None) -> list[DisplayConversation]:
        """Conversations of the imported store, most recent first.

        Args:
            filter_term: Optional case-insensitive display-name filter;
                empty means the full list.
        """
        return self.aggregator.build(self._conversations, filter_term)

    def list_messages(self, conversation_id: str) -> list[RenderableMessage]:
        """Renderable timeline of one conversation, oldest first."""
        reader = self._reader
        if reader is None:
            logger.debug("list_messages called before a store was imported")
            return []

        result = reader.list_messages(conversation_id)
        if result.error is not None:
            self._last_error = result.error
            return []
        return self.timeline_builder.build(result.items, conversation_kind(conversation_id))
