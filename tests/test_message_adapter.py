"""Tests for MessageAdapter."""

from datetime import datetime, timezone

import pytest

from fakes import (
    RECEIVED_ON,
    SENT_ON,
    FakeFileAttachment,
    FakeItemAttachment,
    FakeReferenceAttachment,
    FakeStoreItem,
    make_fetched,
)
from src.config.adapter_config import AppConfig
from src.models.attachment import FileAttachment, ItemAttachment
from src.models.fetched_item import BodyType, Mailbox, MeetingFields, MessageBody
from src.services.conversation.identity import ConversationIdMode, MalformedConversationIndexError
from src.services.mail_store.base import (
    PID_TAG_BODY_HTML,
    PID_TAG_CONVERSATION_ID,
    REQUIRED_FIELDS,
    StaleMessageError,
    StoreFetchFailure,
    StoreOperationFailure,
)
from src.services.message.adapter import MessageAdapter
from src.storage.audit_log import AuditLog
from src.utils.address_utils import InvalidArgumentError

GUID = bytes.fromhex("0123456789abcdef0011223344556677")


def upper_converter(html: str) -> str:
    return html.upper()


@pytest.fixture
def item():
    return FakeStoreItem()


@pytest.fixture
def message(item):
    return MessageAdapter(item, converter=upper_converter)


class TestConstruction:
    """Test hydrate step at construction."""

    def test_loads_required_fields_once(self, item):
        MessageAdapter(item, converter=upper_converter)

        assert item.loaded_fields == [REQUIRED_FIELDS]

    def test_load_error_becomes_fetch_failure(self):
        item = FakeStoreItem(load_error=ConnectionError("timeout"))

        with pytest.raises(StoreFetchFailure) as exc_info:
            MessageAdapter(item)

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_fetch_failure_propagates_unchanged(self):
        error = StoreFetchFailure("denied")

        with pytest.raises(StoreFetchFailure) as exc_info:
            MessageAdapter(FakeStoreItem(load_error=error))

        assert exc_info.value is error

    def test_attachments_classified_at_construction(self):
        fetched = make_fetched(
            attachments=(
                FakeFileAttachment("trace.log"),
                FakeReferenceAttachment("link"),
                FakeItemAttachment("Fwd: outage"),
            )
        )

        message = MessageAdapter(FakeStoreItem(fetched))

        assert [type(a) for a in message.attachments] == [FileAttachment, ItemAttachment]


class TestPassthroughAccessors:
    """Test accessors reflecting fetched fields."""

    def test_identity_fields(self, message):
        assert message.subject == "Printer on fire"
        assert message.conversation_topic == "Printer on fire"

    def test_participants(self, message):
        assert message.sender_name == "John Doe"
        assert message.sender_address == "jdoe@example.com"
        assert message.sender_alias == "jdoe"
        assert message.to_addresses == ("help@example.com", "ops@example.com")
        assert message.to_names == ("Help Desk", None)
        assert message.cc_addresses == ("jroe@example.com",)
        assert message.cc_names == ("Jane Roe",)

    def test_timestamps(self, message):
        assert message.sent_on == SENT_ON
        assert message.received_on == RECEIVED_ON

    def test_sender_alias_without_address_raises_error(self):
        fetched = make_fetched(sender=Mailbox("Nobody", None))
        message = MessageAdapter(FakeStoreItem(fetched))

        with pytest.raises(InvalidArgumentError):
            message.sender_alias

    def test_repeated_reads_are_identical(self, message):
        """Test accessors are idempotent."""
        for accessor in ("subject", "conversation_id", "raw_body", "plain_text_body", "to_addresses", "attachments"):
            assert getattr(message, accessor) == getattr(message, accessor)


class TestMeetingFields:
    """Test meeting facet accessors."""

    def test_not_a_meeting_request(self, message):
        assert message.is_meeting_request is False
        assert message.location == ""
        assert message.start_time is None
        assert message.end_time is None

    def test_meeting_request(self):
        start = datetime(2025, 2, 1, 9, 0, tzinfo=timezone.utc)
        end = datetime(2025, 2, 1, 10, 0, tzinfo=timezone.utc)
        fetched = make_fetched(meeting=MeetingFields("Room 4", start, end))

        message = MessageAdapter(FakeStoreItem(fetched))

        assert message.is_meeting_request is True
        assert message.location == "Room 4"
        assert message.start_time == start
        assert message.end_time == end


class TestBody:
    """Test body accessors through the adapter."""

    def test_plain_text_body(self, message):
        assert message.raw_body == "hi"
        assert message.plain_text_body == "hi"
        assert message.is_html_body is False

    def test_html_property_is_raw_body(self):
        fetched = make_fetched(
            body=MessageBody("<p>hi</p>", BodyType.HTML),
            extended_properties={PID_TAG_BODY_HTML: b"<p>hi</p>"},
        )
        config = AppConfig(adapter={"html_body_encoding": "utf-8"})

        message = MessageAdapter(FakeStoreItem(fetched), converter=upper_converter, config=config)

        assert message.raw_body == "<p>hi</p>"
        assert message.plain_text_body == "<P>HI</P>"
        assert message.is_html_body is True

    def test_last_message_text(self):
        fetched = make_fetched(body=MessageBody("Fixed it.\n\n-----Original Message-----\nBroken", BodyType.TEXT))

        message = MessageAdapter(FakeStoreItem(fetched))

        assert message.last_message_text == "Fixed it."


class TestConversationId:
    """Test conversation id through the adapter."""

    def test_index_mode_is_default(self, message):
        assert message.conversation_id_mode is ConversationIdMode.INDEX
        assert message.conversation_id == bytes(range(22)).hex().upper()

    def test_guid_only_uses_native_property(self):
        fetched = make_fetched(extended_properties={PID_TAG_CONVERSATION_ID: GUID})

        message = MessageAdapter(FakeStoreItem(fetched), ConversationIdMode.GUID_ONLY)

        assert message.conversation_id == "0123456789ABCDEF0011223344556677"

    def test_guid_only_falls_back_to_index(self):
        message = MessageAdapter(FakeStoreItem(), ConversationIdMode.GUID_ONLY)

        assert message.conversation_id == bytes(range(6, 22)).hex().upper()

    def test_guid_only_from_config(self):
        config = AppConfig(adapter={"use_conversation_guid_only": True})

        message = MessageAdapter(FakeStoreItem(), config=config)

        assert message.conversation_id_mode is ConversationIdMode.GUID_ONLY

    def test_guid_only_short_index_raises_error(self):
        fetched = make_fetched(conversation_index=bytes(10))
        message = MessageAdapter(FakeStoreItem(fetched), ConversationIdMode.GUID_ONLY)

        with pytest.raises(MalformedConversationIndexError):
            message.conversation_id


class TestSaveToFile:
    """Test writing the MIME blob."""

    def test_round_trip(self, message, tmp_path):
        target = tmp_path / "message.eml"

        written = message.save_to_file(target)

        assert written == target
        assert target.read_bytes() == b"Subject: Printer on fire\r\n\r\nhi\r\n"

    def test_overwrites_existing_file(self, message, tmp_path):
        target = tmp_path / "message.eml"
        target.write_bytes(b"x" * 1000)

        message.save_to_file(target)

        assert target.read_bytes() == b"Subject: Printer on fire\r\n\r\nhi\r\n"

    def test_default_path(self, tmp_path):
        config = AppConfig(adapter={"save_directory": str(tmp_path)})
        message = MessageAdapter(FakeStoreItem(), config=config)

        written = message.save_to_file()

        assert written == tmp_path / "OriginalMessage.eml"
        assert written.exists()

    def test_save_is_audited(self, item, tmp_path):
        audit_log = AuditLog(tmp_path / "audit.log")
        message = MessageAdapter(item, audit_log=audit_log)

        message.save_to_file(tmp_path / "m.eml")

        events = audit_log.read_events()
        assert events[-1]["event_type"] == "message_saved"
        assert events[-1]["size"] == len(item.fetched.mime_content)


class TestStoreOperations:
    """Test delete, move and reply."""

    def test_delete_moves_to_trash_and_goes_stale(self, item, message):
        message.delete()

        assert item.deleted_with is True
        assert message.is_stale is True
        with pytest.raises(StaleMessageError):
            message.subject

    def test_move_returns_new_item_and_goes_stale(self, item, message):
        moved = message.move("Processed")

        assert item.moved_to == "Processed"
        assert isinstance(moved, FakeStoreItem)
        with pytest.raises(StaleMessageError):
            message.raw_body

    def test_stale_message_rejects_second_delete(self, message):
        message.delete()

        with pytest.raises(StaleMessageError):
            message.delete()

    def test_delete_failure_is_wrapped(self):
        message = MessageAdapter(FakeStoreItem(operation_error=OSError("offline")))

        with pytest.raises(StoreOperationFailure):
            message.delete()

        assert message.is_stale is False

    def test_reply_sends_html_draft(self, item, message):
        message.reply("<p>On it</p>", reply_all=True)

        draft = item.drafts[0]
        assert draft.reply_all is True
        assert draft.body_prefix_html == "<p>On it</p>"
        assert draft.sent is True

    def test_reply_failure_is_wrapped(self):
        item = FakeStoreItem(operation_error=RuntimeError("rejected"))
        message = MessageAdapter(item)

        with pytest.raises(StoreOperationFailure):
            message.reply("<p>x</p>", reply_all=False)

    def test_operations_are_audited(self, item, tmp_path):
        audit_log = AuditLog(tmp_path / "audit.log")
        message = MessageAdapter(item, audit_log=audit_log)

        message.reply("<p>ok</p>", reply_all=False)
        message.move("Done")

        assert [e["event_type"] for e in audit_log.read_events()] == ["reply_sent", "message_moved"]
