"""Phone-number suffix index over an address book snapshot.

The index maps each contact's full normalized number to the contact's name.
Lookups tolerate international prefix drift (country codes, trunk zeros) by
trying every suffix of the queried number, longest first, down to
``MIN_SUFFIX_LENGTH`` digits. This is a heuristic: two contacts whose numbers
share a long enough tail can shadow each other.

Thread Safety:
    ``ContactIndex`` is immutable once built. ``ContactIndexHolder`` publishes
    a fully built replacement by swapping one reference under a lock, so a
    reader sees either the previous index or the new one, never a mix.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from contracts.msgstore import ContactRecord
from waviewer.identifiers import normalize

logger = logging.getLogger(__name__)

# Shortest normalized number stored, and shortest suffix tried at lookup
MIN_SUFFIX_LENGTH = 5

UNKNOWN_NAME = "Unknown"


class ContactIndex:
    """Immutable normalized-number -> display-name mapping.

    Example:
        index = ContactIndex.build([ContactRecord("Alice", ("+1 (555) 123-4567",))])
        index.resolve_by_suffix("15551234567")   # "Alice"
        index.resolve_by_suffix("0015551234567") # "Alice" (stored number is a suffix)
        index.resolve_by_suffix("19995554567")   # "19995554567" (no stored suffix; fallback)
        index.resolve_by_suffix("4420")          # "4420" (fallback)
    """

    __slots__ = ("_names", "_collisions")

    def __init__(
        self,
        names: Mapping[str, str] | None = None,
        collisions: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._names: Mapping[str, str] = MappingProxyType(dict(names or {}))
        self._collisions: Mapping[str, tuple[str, ...]] = MappingProxyType(
            dict(collisions or {})
        )

    @classmethod
    def build(cls, contacts: Iterable[ContactRecord | Mapping]) -> ContactIndex:
        """Build an index in a single pass over a contact snapshot.

        Every phone number whose normalized form has at least
        ``MIN_SUFFIX_LENGTH`` digits is stored in full. When two contacts
        normalize to the same number the later one wins; the displaced names
        are kept in ``collisions``.

        Args:
            contacts: ``ContactRecord`` objects or ``{"name", "phoneNumbers"}`` dicts.
        """
        names: dict[str, str] = {}
        collisions: dict[str, list[str]] = {}
        contact_count = 0

        for raw in contacts:
            contact = raw if isinstance(raw, ContactRecord) else ContactRecord.from_mapping(raw)
            contact_count += 1
            name = contact.name.strip()
            if not name:
                continue
            for number in contact.phone_numbers:
                digits = normalize(number)
                if len(digits) < MIN_SUFFIX_LENGTH:
                    continue
                previous = names.get(digits)
                if previous is not None and previous != name:
                    collisions.setdefault(digits, []).append(previous)
                names[digits] = name

        if collisions:
            logger.debug(
                "Contact index: %d numbers shared by different contacts (last one wins)",
                len(collisions),
            )
        logger.debug("Built contact index: %d numbers from %d contacts", len(names), contact_count)
        return cls(names, {key: tuple(value) for key, value in collisions.items()})

    def lookup(self, identifier_local_part: str) -> str | None:
        """Return the name for the longest matching suffix, or None."""
        digits = normalize(identifier_local_part)
        # offset 0 is the whole number, so the first hit is the longest suffix
        for offset in range(len(digits) - MIN_SUFFIX_LENGTH + 1):
            name = self._names.get(digits[offset:])
            if name is not None:
                return name
        return None

    def resolve_by_suffix(self, identifier_local_part: str) -> str:
        """Resolve to a contact name, falling back to the normalized digits.

        Never raises and never returns an empty string. Input without digits
        falls back to its stripped text, then to ``"Unknown"``.
        """
        name = self.lookup(identifier_local_part)
        if name is not None:
            return name
        digits = normalize(identifier_local_part)
        if digits:
            return digits
        return (identifier_local_part or "").strip() or UNKNOWN_NAME

    @property
    def collisions(self) -> Mapping[str, tuple[str, ...]]:
        """Numbers claimed by more than one contact, mapped to the losing names."""
        return self._collisions

    def __contains__(self, normalized_number: object) -> bool:
        return normalized_number in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ContactIndex(numbers={len(self._names)}, collisions={len(self._collisions)})"


class ContactIndexHolder:
    """Process-lifetime holder that publishes whole replacement indexes.

    Example:
        holder = ContactIndexHolder()
        holder.rebuild(source.fetch())
        name = holder.current.resolve_by_suffix("15551234567")
    """

    def __init__(self, index: ContactIndex | None = None) -> None:
        self._index = index or ContactIndex()
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def current(self) -> ContactIndex:
        """The most recently published index."""
        return self._index

    @property
    def generation(self) -> int:
        """Number of indexes published since construction."""
        return self._generation

    def publish(self, index: ContactIndex) -> None:
        with self._lock:
            self._index = index
            self._generation += 1

    def rebuild(self, contacts: Iterable[ContactRecord | Mapping]) -> ContactIndex:
        """Build a new index from a snapshot and publish it."""
        # Build outside the lock: readers keep using the old index meanwhile
        index = ContactIndex.build(contacts)
        self.publish(index)
        return index

    def clear(self) -> None:
        """Publish an empty index (digit fallback only)."""
        self.publish(ContactIndex())
