"""Identifier normalization.

Participant identifiers in the store look like ``15551234567@s.whatsapp.net``
or ``120363012345678901@g.us``. Address book numbers come in any formatting
(``+1 (555) 123-4567``). Both are reduced to digit-only strings before they
are compared.
"""

from __future__ import annotations

import string

from contracts.msgstore import GROUP_IDENTIFIER_SUFFIX, ConversationKind


def normalize(value: str | None) -> str:
    """Strip every non-digit character.

    Total and idempotent: ``normalize(normalize(x)) == normalize(x)``.
    ``None`` and the empty string both normalize to ``""``.
    """
    if not value:
        return ""
    # ASCII digits only; str.isdigit also accepts superscripts and other numerals
    return "".join(ch for ch in value if ch in string.digits)


def local_part(identifier: str | None) -> str:
    """Return the part of an identifier before the first ``@``."""
    if not identifier:
        return ""
    return identifier.split("@", 1)[0]


def is_group_identifier(identifier: str | None) -> bool:
    """True when the identifier carries the group conversation suffix."""
    return bool(identifier) and GROUP_IDENTIFIER_SUFFIX in identifier


def conversation_kind(identifier: str | None) -> ConversationKind:
    return ConversationKind.of(identifier)
