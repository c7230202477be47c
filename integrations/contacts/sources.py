"""Address book snapshot providers.

Each source returns a list of ``ContactRecord`` from one fetch. Sources never
cache; the caller decides when to re-fetch and rebuild the contact index.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from contracts.msgstore import ContactRecord, phone_numbers_from
from waviewer.errors import ContactSourceError, ErrorCode, contact_source_unavailable

logger = logging.getLogger(__name__)

# Database connection timeout for contact databases
DB_TIMEOUT_SECONDS = 5.0

# Android ContactsContract mimetype for phone rows
ANDROID_PHONE_MIMETYPE = "vnd.android.cursor.item/phone_v2"


class StaticContactSource:
    """In-memory snapshot, e.g. contacts already fetched by a UI layer."""

    def __init__(self, contacts: Iterable[ContactRecord | Mapping[str, Any]] = ()) -> None:
        self._contacts = [
            c if isinstance(c, ContactRecord) else ContactRecord.from_mapping(c) for c in contacts
        ]

    def fetch(self) -> list[ContactRecord]:
        return list(self._contacts)


class JsonContactSource:
    """Contacts exported as JSON.

    Accepts either a list of ``{"name": ..., "phoneNumbers": [...]}`` objects
    or a ``{"name": ["number", ...]}`` mapping.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def fetch(self) -> list[ContactRecord]:
        """Read and parse the export.

        Raises:
            ContactSourceUnavailableError: If the file is missing or unreadable.
            ContactSourceError: If the JSON has an unexpected shape.
        """
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise contact_source_unavailable(str(self.path), e) from e

        if isinstance(data, Mapping):
            return [
                ContactRecord(name=str(name), phone_numbers=phone_numbers_from(numbers, str(name)))
                for name, numbers in data.items()
            ]
        if isinstance(data, list):
            return [ContactRecord.from_mapping(item) for item in data if isinstance(item, Mapping)]

        raise ContactSourceError(
            f"Unsupported contact export format in {self.path}",
            source=str(self.path),
            code=ErrorCode.CNT_SOURCE_INVALID,
        )


class AndroidContactsSource:
    """Contacts read from an Android ``contacts2.db``.

    The schema varies by Android version and OEM; only the standard
    ``data``/``contacts`` join is supported.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def fetch(self) -> list[ContactRecord]:
        """Read phone numbers grouped by contact display name.

        Raises:
            ContactSourceUnavailableError: If the database cannot be opened or queried.
        """
        if not self.path.is_file():
            raise contact_source_unavailable(str(self.path))

        try:
            uri = f"file:{self.path}?mode=ro"
            conn = sqlite3.connect(uri, uri=True, timeout=DB_TIMEOUT_SECONDS)
            try:
                rows = conn.execute(
                    """
                    SELECT contacts._id AS contact_id,
                           contacts.display_name AS name,
                           data.data1 AS number
                    FROM data
                    JOIN contacts ON contacts._id = data.contact_id
                    WHERE data.mimetype = ?
                      AND data.data1 IS NOT NULL
                      AND contacts.display_name IS NOT NULL
                    ORDER BY contacts._id, data._id
                    """,
                    (ANDROID_PHONE_MIMETYPE,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise contact_source_unavailable(str(self.path), e) from e

        # dict keeps first-seen contact order, which decides index collisions
        grouped: dict[int, tuple[str, list[str]]] = {}
        for contact_id, name, number in rows:
            grouped.setdefault(contact_id, (name, []))[1].append(number)

        logger.debug("Loaded %d contacts from %s", len(grouped), self.path)
        return [ContactRecord(name=name, phone_numbers=tuple(numbers)) for name, numbers in grouped.values()]


def contact_source_for(path: Path | str) -> JsonContactSource | AndroidContactsSource:
    """Pick a source implementation from the file extension."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        return JsonContactSource(path)
    return AndroidContactsSource(path)
