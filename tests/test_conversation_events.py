import asyncio

from wrapcommand.core.errors import SupabaseError
from wrapcommand.models.events import (
    ConversationEventType,
    EmailPayload,
    NotePayload,
    QuotePayload,
    payload_type_for,
)
from wrapcommand.services.conversation_events import MAX_EMAIL_BODY_CHARS, log_conversation_event


def test_event_row_drops_empty_fields(fake_db):
    result = asyncio.run(log_conversation_event(
        fake_db, "conv-1", ConversationEventType.QUOTE_DRAFTED, "luigi",
        QuotePayload(quote_id="q-1", quote_total=1317.5),
    ))
    assert result.success
    assert result.event_id

    row = fake_db.events()[0]
    assert row["conversation_id"] == "conv-1"
    assert row["event_type"] == "quote_drafted"
    assert row["actor"] == "luigi"
    assert row["payload"] == {"quote_id": "q-1", "quote_total": 1317.5}


def test_email_body_is_truncated(fake_db):
    payload = EmailPayload(email_sent_to=["a@example.com"], email_subject="Hi", email_body="x" * 5000)
    asyncio.run(log_conversation_event(fake_db, None, ConversationEventType.EMAIL_SENT, "ops_desk", payload))
    row = fake_db.events("email_sent")[0]
    assert len(row["payload"]["email_body"]) == MAX_EMAIL_BODY_CHARS
    assert row["conversation_id"] is None


def test_dict_payload_is_validated_against_event_type(fake_db):
    result = asyncio.run(log_conversation_event(
        fake_db, "conv-1", ConversationEventType.EMAIL_SENT, "ops_desk", {"quote_id": "q-1"},
    ))
    assert result.success is False
    assert fake_db.events() == []


def test_unknown_payload_fields_rejected(fake_db):
    result = asyncio.run(log_conversation_event(
        fake_db, "conv-1", ConversationEventType.MARKED_COMPLETE, "ops_desk", {"surprise": True},
    ))
    assert result.success is False


def test_database_failure_never_raises(fake_db):
    fake_db.fail_on[("insert", "conversation_events")] = SupabaseError(503, "down")
    result = asyncio.run(log_conversation_event(
        fake_db, "conv-1", ConversationEventType.MARKED_COMPLETE, "ops_desk", NotePayload(reason="done"),
    ))
    assert result.success is False
    assert "down" in result.error


def test_payload_types():
    assert payload_type_for(ConversationEventType.QUOTE_ATTACHED) is QuotePayload
    assert payload_type_for(ConversationEventType.CALL_SCHEDULED) is NotePayload
