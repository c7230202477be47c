"""Tests for conversation and sender name resolution."""

import pytest

from contracts.msgstore import ConversationKind
from waviewer.contacts import (
    GROUP_FALLBACK_NAME,
    UNKNOWN_NAME,
    ContactIndexHolder,
    ContactResolver,
)


@pytest.fixture
def resolver(contacts) -> ContactResolver:
    holder = ContactIndexHolder()
    holder.rebuild(contacts)
    return ContactResolver(holder)


class TestDisplayNameFor:
    def test_direct_resolves_contact(self, resolver):
        assert resolver.display_name_for("15551234567@s.whatsapp.net") == "Alice"

    def test_direct_unknown_falls_back_to_digits(self, resolver):
        assert resolver.display_name_for("19995550000@s.whatsapp.net") == "19995550000"

    def test_direct_ignores_subject(self, resolver):
        name = resolver.display_name_for(
            "15551234567@s.whatsapp.net", ConversationKind.DIRECT, subject="Old subject"
        )
        assert name == "Alice"

    def test_group_uses_subject(self, resolver):
        assert resolver.display_name_for("120363000000000001@g.us", subject=" Family ") == "Family"

    @pytest.mark.parametrize("subject", [None, "", "   "])
    def test_group_without_subject(self, resolver, subject):
        name = resolver.display_name_for("120363000000000001@g.us", subject=subject)
        assert name == GROUP_FALLBACK_NAME

    def test_group_never_resolved_through_contacts(self):
        """A group token that happens to end in a contact's number is still a group."""
        holder = ContactIndexHolder()
        holder.rebuild([{"name": "Alice", "phoneNumbers": ["15551234567"]}])
        resolver = ContactResolver(holder)
        assert resolver.display_name_for("12015551234567@g.us") == GROUP_FALLBACK_NAME

    def test_explicit_kind_wins(self, resolver):
        name = resolver.display_name_for("15551234567@s.whatsapp.net", ConversationKind.GROUP)
        assert name == GROUP_FALLBACK_NAME


class TestSenderNameFor:
    def test_resolves_sender(self, resolver):
        assert resolver.sender_name_for("447700900123@s.whatsapp.net") == "Bob"

    @pytest.mark.parametrize("identifier", [None, ""])
    def test_missing_sender(self, resolver, identifier):
        assert resolver.sender_name_for(identifier) == UNKNOWN_NAME


class TestIndexSwap:
    def test_picks_up_rebuilt_index(self):
        holder = ContactIndexHolder()
        resolver = ContactResolver(holder)
        assert resolver.display_name_for("15551234567@s.whatsapp.net") == "15551234567"

        holder.rebuild([{"name": "Alice", "phoneNumbers": ["+1 555 123 4567"]}])

        assert resolver.display_name_for("15551234567@s.whatsapp.net") == "Alice"
        assert resolver.current_index is holder.current

    def test_default_holder(self):
        assert ContactResolver().display_name_for("12345@s.whatsapp.net") == "12345"
