"""Address book sources for contact name resolution."""

from .sources import (
    AndroidContactsSource,
    JsonContactSource,
    StaticContactSource,
    contact_source_for,
)

__all__ = [
    "AndroidContactsSource",
    "JsonContactSource",
    "StaticContactSource",
    "contact_source_for",
]
