"""Contact index and name resolution."""

from waviewer.contacts.index import (
    MIN_SUFFIX_LENGTH,
    UNKNOWN_NAME,
    ContactIndex,
    ContactIndexHolder,
)
from waviewer.contacts.resolver import GROUP_FALLBACK_NAME, ContactResolver

__all__ = [
    "ContactIndex",
    "ContactIndexHolder",
    "ContactResolver",
    "GROUP_FALLBACK_NAME",
    "MIN_SUFFIX_LENGTH",
    "UNKNOWN_NAME",
]
