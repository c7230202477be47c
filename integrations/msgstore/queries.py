"""SQL queries for msgstore.db access.

Handles optional schema structures that differ between app versions
(media side table, per-message sender column, media captions).

Note: All query variations are selected by boolean feature flags detected
from the schema. User input is NEVER interpolated into query strings - the
conversation identifier is always passed as a parameterized query argument.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass


@dataclass(frozen=True)
class SchemaFeatures:
    """Optional structures present in a store.

    Attributes:
        has_media_table: ``message_media`` table exists.
        media_has_caption: ``message_media.media_caption`` column exists.
        has_sender_column: ``message.sender_jid_row_id`` column exists.
        has_sort_timestamp: ``chat.sort_timestamp`` column exists.
    """

    has_media_table: bool = False
    media_has_caption: bool = False
    has_sender_column: bool = False
    has_sort_timestamp: bool = True


def list_tables(conn: sqlite3.Connection) -> set[str]:
    """Names of all tables in the store."""
    cursor = conn.cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
    return {row[0] for row in cursor.fetchall()}


def _table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    cursor = conn.cursor()
    # Table names come from a fixed list, never from callers
    cursor.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def detect_schema_features(conn: sqlite3.Connection) -> SchemaFeatures:
    """Detect optional schema structures.

    Args:
        conn: SQLite connection to msgstore.db

    Returns:
        SchemaFeatures; all optional flags False if the schema cannot be read.
    """
    try:
        tables = list_tables(conn)
        message_columns = _table_columns(conn, "message") if "message" in tables else set()
        chat_columns = _table_columns(conn, "chat") if "chat" in tables else set()
        has_media_table = "message_media" in tables
        media_columns = _table_columns(conn, "message_media") if has_media_table else set()
    except sqlite3.Error:
        return SchemaFeatures()

    return SchemaFeatures(
        has_media_table=has_media_table,
        media_has_caption="media_caption" in media_columns,
        has_sender_column="sender_jid_row_id" in message_columns,
        has_sort_timestamp="sort_timestamp" in chat_columns or not chat_columns,
    )


_CONVERSATIONS_QUERY = """
    SELECT DISTINCT
        chat._id AS chat_row_id,
        jid.raw_string AS raw_identifier,
        chat.subject AS subject,
        chat.created_timestamp AS created_timestamp,
        chat.last_message_row_id AS last_message_row_id
    FROM chat
    INNER JOIN jid ON chat.jid_row_id = jid._id
    ORDER BY {order_column} DESC
"""

_MESSAGES_QUERY = """
    SELECT
        message._id AS id,
        jid.raw_string AS raw_identifier,
        message.from_me AS from_me,
        message.key_id AS key_id,
        message.status AS status,
        IFNULL(message.text_data, '') AS body,
        message.timestamp AS timestamp,
        {media_columns},
        {sender_columns}
    FROM message
    LEFT JOIN chat ON message.chat_row_id = chat._id
    LEFT JOIN jid ON chat.jid_row_id = jid._id
    {media_join}
    {sender_join}
    WHERE jid.raw_string = ?
    ORDER BY message.timestamp ASC, message._id ASC
"""


def get_query(name: str, features: SchemaFeatures | None = None) -> str:
    """Get SQL query text for the detected schema.

    Args:
        name: Query name (conversations, messages)
        features: Detected schema features; defaults assume only required tables.

    Returns:
        SQL query string with optional joins applied

    Raises:
        KeyError: If query name not found
    """
    features = features or SchemaFeatures()

    if name == "conversations":
        order_column = "chat.sort_timestamp" if features.has_sort_timestamp else "chat._id"
        return _CONVERSATIONS_QUERY.format(order_column=order_column)

    if name == "messages":
        if features.has_media_table:
            caption = "media.media_caption" if features.media_has_caption else "NULL"
            media_columns = (
                f"media.message_row_id AS media_row_ref, "
                f"media.file_path AS media_path, {caption} AS media_caption"
            )
            media_join = "LEFT JOIN message_media AS media ON message._id = media.message_row_id"
        else:
            media_columns = "NULL AS media_row_ref, NULL AS media_path, NULL AS media_caption"
            media_join = ""

        if features.has_sender_column:
            sender_columns = (
                "message.sender_jid_row_id AS sender_row_ref, sender.raw_string AS sender_identifier"
            )
            sender_join = "LEFT JOIN jid AS sender ON message.sender_jid_row_id = sender._id"
        else:
            sender_columns = "NULL AS sender_row_ref, NULL AS sender_identifier"
            sender_join = ""

        return _MESSAGES_QUERY.format(
            media_columns=media_columns,
            media_join=media_join,
            sender_columns=sender_columns,
            sender_join=sender_join,
        )

    raise KeyError(name)
