"""Read-only msgstore.db access.

Implements the StoreReader protocol from contracts/msgstore.py.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from contracts.msgstore import Conversation, Message, QueryResult, TimestampUnit
from waviewer.config import WaviewerConfig, get_config
from waviewer.errors import (
    StoreError,
    StoreUnreadableError,
    store_missing_tables,
    store_not_found,
    store_query_failed,
)

from .parser import parse_conversation_row, parse_message_row, suspect_timestamp_unit
from .queries import SchemaFeatures, detect_schema_features, get_query, list_tables

logger = logging.getLogger(__name__)


class MsgStoreReader:
    """Read-only access to a decrypted msgstore.db.

    Every query opens a short-lived read-only connection and closes it when
    done, so concurrent calls for different conversations share no state.
    Query failures never raise out of ``list_conversations`` or
    ``list_messages``: they come back as an empty ``QueryResult`` carrying a
    ``StoreUnreadableError``.

    Example:
        reader = MsgStoreReader(Path("msgstore.db"))
        if reader.check_access():
            result = reader.list_conversations()
            for conv in result.items:
                messages = reader.list_messages(conv.id).items
    """

    def __init__(self, db_path: Path | str, config: WaviewerConfig | None = None) -> None:
        """Initialize the reader.

        Args:
            db_path: Path to msgstore.db.
            config: Configuration; defaults to the shared config.
        """
        self.db_path = Path(db_path)
        self.config = config or get_config()
        self._features: SchemaFeatures | None = None
        self._unit_warnings: set[str] = set()

    @property
    def conversation_unit(self) -> TimestampUnit:
        return self.config.store.conversation_timestamp_unit

    @property
    def message_unit(self) -> TimestampUnit:
        return self.config.store.message_timestamp_unit

    def _connect(self) -> sqlite3.Connection:
        """Open a read-only connection.

        Raises:
            StoreNotFoundError: If the file does not exist.
            StoreUnreadableError: If SQLite cannot open it.
        """
        db_path_str = str(self.db_path)

        if not self.db_path.is_file():
            raise store_not_found(db_path_str)

        try:
            uri = f"file:{self.db_path}?mode=ro"
            conn = sqlite3.connect(
                uri,
                uri=True,
                timeout=self.config.store.timeout_seconds,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            return conn
        except PermissionError as e:
            raise StoreUnreadableError(
                f"Permission denied opening message store: {db_path_str}",
                db_path=db_path_str,
                cause=e,
            ) from e
        except (sqlite3.Error, OSError) as e:
            raise StoreUnreadableError(
                f"Failed to open message store: {e}",
                db_path=db_path_str,
                cause=e,
            ) from e

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
        finally:
            try:
                conn.close()
            except sqlite3.Error:
                logger.debug("Error closing store connection", exc_info=True)

    def _schema_features(self, conn: sqlite3.Connection) -> SchemaFeatures:
        if self._features is None:
            self._features = detect_schema_features(conn)
            logger.debug("Detected msgstore schema features: %s", self._features)
        return self._features

    def table_names(self) -> set[str]:
        """Names of all tables in the store.

        Raises:
            StoreError: If the store cannot be opened or is not a database.
        """
        with self._connection() as conn:
            try:
                return list_tables(conn)
            except sqlite3.Error as e:
                raise StoreUnreadableError(
                    f"Cannot list tables: {e}", db_path=str(self.db_path), cause=e
                ) from e

    def missing_tables(self) -> set[str]:
        """Required tables the store lacks.

        Raises:
            StoreError: If the store cannot be opened or is not a database.
        """
        tables = self.table_names()
        logger.debug("Tables in message store: %s", sorted(tables))
        return set(self.config.store.required_tables) - tables

    def validate(self) -> None:
        """Check that the store opens and has every required table.

        Raises:
            StoreError: Describing the first problem found.
        """
        missing = self.missing_tables()
        if missing:
            raise store_missing_tables(str(self.db_path), missing)

    def check_access(self) -> bool:
        """Check if the store can be read."""
        try:
            self.validate()
            return True
        except StoreError as e:
            logger.debug("Message store not accessible: %s", e)
            return False

    def list_conversations(self) -> QueryResult[Conversation]:
        """Get all conversations, most recent first.

        Returns:
            QueryResult with conversations in the store's recency order, or
            an empty result carrying the error if the store is unreadable.
        """
        query = get_query("conversations")
        try:
            with self._connection() as conn:
                features = self._schema_features(conn)
                query = get_query("conversations", features)
                rows = [dict(row) for row in conn.execute(query).fetchall()]
        except StoreError as e:
            logger.warning("Cannot list conversations: %s", e)
            return QueryResult(error=e)
        except sqlite3.Error as e:
            error = store_query_failed(str(self.db_path), query, e)
            logger.warning("Error loading conversations: %s", e)
            return QueryResult(error=error)

        if not rows:
            logger.info("No conversation rows returned from %s", self.db_path)
            return QueryResult()

        conversations: list[Conversation] = []
        for row in rows:
            if row.get("raw_identifier") is None:
                logger.debug("Skipping conversation row %s without identifier", row.get("chat_row_id"))
                continue
            conversations.append(parse_conversation_row(row, self.conversation_unit))

        self._cross_check_units(
            "chat.created_timestamp",
            (c.created_at.value for c in conversations),
            self.conversation_unit,
        )
        return QueryResult(items=conversations)

    def list_messages(self, conversation_id: str) -> QueryResult[Message]:
        """Get all messages of a conversation, oldest first.

        Args:
            conversation_id: Raw identifier of the conversation.

        Returns:
            QueryResult with messages in ascending timestamp order (row order
            breaks ties), or an empty result carrying the error.
        """
        query = get_query("messages")
        try:
            with self._connection() as conn:
                features = self._schema_features(conn)
                query = get_query("messages", features)
                rows = [dict(row) for row in conn.execute(query, (conversation_id,)).fetchall()]
        except StoreError as e:
            logger.warning("Cannot list messages for %s: %s", conversation_id, e)
            return QueryResult(error=e)
        except sqlite3.Error as e:
            error = store_query_failed(str(self.db_path), query, e)
            logger.warning("Error loading messages for %s: %s", conversation_id, e)
            return QueryResult(error=error)

        messages = [parse_message_row(row, self.message_unit) for row in rows]
        self._cross_check_units(
            "message.timestamp", (m.timestamp.value for m in messages), self.message_unit
        )
        return QueryResult(items=messages)

    def _cross_check_units(self, column: str, values: Iterable[int], unit: TimestampUnit) -> None:
        if column in self._unit_warnings:
            return
        observed = suspect_timestamp_unit(values, unit)
        if observed is not None:
            self._unit_warnings.add(column)
            logger.warning(
                "%s is configured as %s but values look like %s; check store.%s",
                column,
                unit.value,
                observed.value,
                "conversation_timestamp_unit"
                if column.startswith("chat.")
                else "message_timestamp_unit",
            )
