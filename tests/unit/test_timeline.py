"""Tests for timeline construction."""

from datetime import UTC, date, timedelta, timezone

import pytest

from contracts.msgstore import (
    ConversationKind,
    DeliveryStatus,
    EpochTimestamp,
    MediaRef,
    Message,
)
from integrations.msgstore import MsgStoreReader
from tests.conftest import ALICE_JID, FAMILY_JID
from waviewer.contacts import UNKNOWN_NAME, ContactIndexHolder, ContactResolver
from waviewer.timeline import MEDIA_PLACEHOLDER, TimelineBuilder, day_label

GROUP = "120363000000000001@g.us"


def utc_millis(day: int, hour: int) -> EpochTimestamp:
    # 2024-01-01 00:00 UTC
    return EpochTimestamp(1_704_067_200_000 + ((day - 1) * 24 + hour) * 3_600_000)


def make_message(msg_id, hour, *, day=1, participant=ALICE_JID, **kwargs):
    defaults = {
        "is_outgoing": False,
        "external_key": f"K{msg_id}",
        "status_code": 0,
        "body": f"message {msg_id}",
    }
    defaults.update(kwargs)
    return Message(
        id=msg_id,
        conversation_participant=participant,
        timestamp=utc_millis(day, hour),
        **defaults,
    )


@pytest.fixture
def resolver(contacts) -> ContactResolver:
    holder = ContactIndexHolder()
    holder.rebuild(contacts)
    return ContactResolver(holder)


@pytest.fixture
def builder(resolver) -> TimelineBuilder:
    return TimelineBuilder(resolver, tz=UTC)


class TestDateSeparators:
    def test_first_message_of_each_day(self, builder):
        messages = [
            make_message(1, 10),
            make_message(2, 14),
            make_message(3, 9, day=2),
        ]
        timeline = builder.build(messages)
        assert [item.show_date_separator for item in timeline] == [True, False, True]
        assert [item.day for item in timeline] == [
            date(2024, 1, 1),
            date(2024, 1, 1),
            date(2024, 1, 2),
        ]

    def test_single_message(self, builder):
        [item] = builder.build([make_message(1, 10)])
        assert item.show_date_separator is True

    def test_empty(self, builder):
        assert builder.build([]) == []

    def test_order_preserved(self, builder):
        messages = [make_message(i, i) for i in range(5)]
        assert [item.message.id for item in builder.build(messages)] == [0, 1, 2, 3, 4]

    def test_days_follow_timezone(self, resolver):
        messages = [make_message(1, 23)]
        [utc_item] = TimelineBuilder(resolver, tz=UTC).build(messages)
        [east_item] = TimelineBuilder(resolver, tz=timezone(timedelta(hours=2))).build(messages)
        assert utc_item.day == date(2024, 1, 1)
        assert east_item.day == date(2024, 1, 2)


class TestSenderNames:
    def test_outgoing_has_no_sender(self, builder):
        [item] = builder.build([make_message(1, 10, is_outgoing=True)])
        assert item.sender_name is None

    def test_direct_sender_is_peer(self, builder):
        [item] = builder.build([make_message(1, 10)])
        assert item.sender_name == "Alice"

    def test_group_sender_from_message(self, builder):
        """Each group message is attributed to its own sender, not the group."""
        messages = [
            make_message(1, 10, participant=GROUP, sender_identifier="447700900123@s.whatsapp.net"),
            make_message(2, 11, participant=GROUP, sender_identifier=ALICE_JID),
            make_message(3, 12, participant=GROUP, sender_identifier="19995550000@s.whatsapp.net"),
        ]
        timeline = builder.build(messages, ConversationKind.GROUP)
        assert [item.sender_name for item in timeline] == ["Bob", "Alice", "19995550000"]

    def test_group_sender_missing(self, builder):
        [item] = builder.build([make_message(1, 10, participant=GROUP)])
        assert item.sender_name == UNKNOWN_NAME

    def test_kind_derived_from_first_message(self, builder):
        [item] = builder.build(
            [make_message(1, 10, participant=GROUP, sender_identifier=ALICE_JID)]
        )
        assert item.sender_name == "Alice"


class TestStatusAndText:
    @pytest.mark.parametrize(
        "code,status",
        [
            (0, DeliveryStatus.PENDING),
            (1, DeliveryStatus.SENT),
            (2, DeliveryStatus.DELIVERED),
            (3, DeliveryStatus.READ),
            (13, DeliveryStatus.UNKNOWN),
            (None, DeliveryStatus.UNKNOWN),
        ],
    )
    def test_status_mapping(self, builder, code, status):
        [item] = builder.build([make_message(1, 10, is_outgoing=True, status_code=code)])
        assert item.delivery_status is status

    def test_media_placeholder(self, builder):
        [item] = builder.build([make_message(1, 10, body="", media=MediaRef("Media/a.jpg"))])
        assert item.display_text == MEDIA_PLACEHOLDER
        assert item.caption_line is None

    def test_empty_body_without_media(self, builder):
        [item] = builder.build([make_message(1, 10, body="")])
        assert item.display_text == MEDIA_PLACEHOLDER

    def test_caption_line(self, builder):
        [item] = builder.build(
            [make_message(1, 10, body="", media=MediaRef("Media/a.jpg", caption="Beach"))]
        )
        assert item.display_text == MEDIA_PLACEHOLDER
        assert item.caption_line == "Beach"

    def test_body_kept(self, builder):
        [item] = builder.build([make_message(1, 10, body="Hi")])
        assert item.display_text == "Hi"


class TestFromStore:
    def test_alice_timeline(self, msgstore_path, config, resolver):
        messages = MsgStoreReader(msgstore_path, config).list_messages(ALICE_JID).items
        timeline = TimelineBuilder(resolver).build(messages, ConversationKind.DIRECT)
        assert [item.show_date_separator for item in timeline] == [True, False, True]
        assert [item.sender_name for item in timeline] == ["Alice", None, "Alice"]
        assert timeline[2].display_text == MEDIA_PLACEHOLDER
        assert timeline[2].caption_line == "Beach"

    def test_family_timeline(self, msgstore_path, config, resolver):
        messages = MsgStoreReader(msgstore_path, config).list_messages(FAMILY_JID).items
        timeline = TimelineBuilder(resolver).build(messages, ConversationKind.GROUP)
        assert [item.sender_name for item in timeline] == ["Bob", "Alice", None]
        assert timeline[2].delivery_status is DeliveryStatus.DELIVERED


class TestDayLabel:
    def test_today(self):
        assert day_label(date(2024, 1, 2), date(2024, 1, 2)) == "Today"

    def test_yesterday(self):
        assert day_label(date(2024, 1, 1), date(2024, 1, 2)) == "Yesterday"

    def test_older(self):
        assert day_label(date(2023, 12, 25), date(2024, 1, 2)) == "2023-12-25"
