"""Pytest configuration for waviewer tests.

Builds small msgstore.db files in a temporary directory so reader, service
and timeline tests run against real SQLite instead of mocks.
"""

import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from contracts.msgstore import ContactRecord
from waviewer.config import WaviewerConfig, reset_config

ALICE_JID = "15551234567@s.whatsapp.net"
BOB_JID = "447700900123@s.whatsapp.net"
STRANGER_JID = "19995550000@s.whatsapp.net"
FAMILY_JID = "120363000000000001@g.us"
UNNAMED_GROUP_JID = "120363000000000002@g.us"


def local_millis(*args: int) -> int:
    """Epoch milliseconds of a naive local datetime."""
    return int(datetime(*args).timestamp() * 1000)


SCHEMA = """
    CREATE TABLE jid (
        _id INTEGER PRIMARY KEY,
        raw_string TEXT
    );
    CREATE TABLE chat (
        _id INTEGER PRIMARY KEY,
        jid_row_id INTEGER,
        subject TEXT,
        created_timestamp INTEGER,
        sort_timestamp INTEGER,
        last_message_row_id INTEGER
    );
    CREATE TABLE message (
        _id INTEGER PRIMARY KEY,
        chat_row_id INTEGER,
        from_me INTEGER,
        key_id TEXT,
        status INTEGER,
        text_data TEXT,
        timestamp INTEGER,
        sender_jid_row_id INTEGER
    );
    CREATE TABLE message_media (
        message_row_id INTEGER,
        file_path TEXT,
        media_caption TEXT
    );
"""

JIDS = [
    (1, ALICE_JID),
    (2, FAMILY_JID),
    (3, BOB_JID),
    (4, UNNAMED_GROUP_JID),
    (5, STRANGER_JID),
]

# (_id, jid_row_id, subject, created_timestamp, sort_timestamp, last_message_row_id)
CHATS = [
    (1, 1, None, local_millis(2023, 12, 1), 300, 3),
    (2, 2, "Family", local_millis(2023, 11, 1), 500, 6),
    (3, 3, None, local_millis(2023, 10, 1), 100, 8),
    (4, 4, "   ", local_millis(2023, 9, 1), 400, None),
    (5, 5, None, local_millis(2023, 8, 1), 200, None),
]

# (_id, chat_row_id, from_me, key_id, status, text_data, timestamp, sender_jid_row_id)
MESSAGES = [
    (1, 1, 0, "A1", 0, "Hi", local_millis(2024, 1, 1, 10, 0), None),
    (2, 1, 1, "A2", 3, "Hello Alice", local_millis(2024, 1, 1, 14, 0), None),
    (3, 1, 0, "A3", 0, None, local_millis(2024, 1, 2, 9, 0), None),
    (4, 2, 0, "F1", 0, "Dinner at 7", local_millis(2024, 1, 3, 18, 0), 3),
    (5, 2, 0, "F2", 0, "On my way", local_millis(2024, 1, 3, 18, 5), 1),
    (6, 2, 1, "F3", 2, "See you", local_millis(2024, 1, 3, 18, 10), None),
    # inserted out of order with equal timestamps; row id breaks the tie
    (8, 3, 0, "B2", 0, "second", local_millis(2024, 1, 4, 8, 0), None),
    (7, 3, 0, "B1", 0, "first", local_millis(2024, 1, 4, 8, 0), None),
]

MEDIA = [
    (3, "Media/WhatsApp Images/IMG-20240102-WA0001.jpg", "Beach"),
]


def create_msgstore(path: Path, *, with_media: bool = True) -> Path:
    """Write a populated msgstore.db at ``path``."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        if not with_media:
            conn.execute("DROP TABLE message_media")
        conn.executemany("INSERT INTO jid VALUES (?, ?)", JIDS)
        conn.executemany("INSERT INTO chat VALUES (?, ?, ?, ?, ?, ?)", CHATS)
        conn.executemany("INSERT INTO message VALUES (?, ?, ?, ?, ?, ?, ?, ?)", MESSAGES)
        if with_media:
            conn.executemany("INSERT INTO message_media VALUES (?, ?, ?)", MEDIA)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture(autouse=True)
def _reset_config():
    """Keep the config singleton from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> WaviewerConfig:
    return WaviewerConfig()


@pytest.fixture
def msgstore_path(tmp_path: Path) -> Path:
    return create_msgstore(tmp_path / "msgstore.db")


@pytest.fixture
def empty_msgstore_path(tmp_path: Path) -> Path:
    """A store with the required tables but no rows."""
    path = tmp_path / "empty.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def contacts() -> list[ContactRecord]:
    return [
        ContactRecord("Alice", ("+1 (555) 123-4567",)),
        ContactRecord("Bob", ("+44 7700 900123", "07700 900123")),
    ]
