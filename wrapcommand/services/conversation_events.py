"""
Append-only audit log for the conversation_events table.

Every state-changing step in the quote flow records at least one event here.
Rows are only ever inserted; nothing updates or deletes them.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from wrapcommand.core.logger import get_logger
from wrapcommand.models.events import (
    ConversationEventType,
    EventPayload,
    LogEventResult,
    payload_type_for,
)
from wrapcommand.services.supabase_service import SupabaseClient

logger = get_logger(__name__)

EVENTS_TABLE = "conversation_events"
MAX_EMAIL_BODY_CHARS = 2000


def build_payload(event_type: ConversationEventType, payload: Union[EventPayload, Dict[str, Any]]) -> EventPayload:
    """Coerce a payload into the model registered for the event type; raises ValidationError on a mismatch."""
    expected = payload_type_for(event_type)
    if isinstance(payload, expected):
        return payload
    if isinstance(payload, EventPayload):
        payload = payload.model_dump(exclude_none=True)
    return expected.model_validate(payload)


async def log_conversation_event(
    client: SupabaseClient,
    conversation_id: Optional[str],
    event_type: ConversationEventType,
    actor: str,
    payload: Union[EventPayload, Dict[str, Any]],
    subtype: Optional[str] = None,
) -> LogEventResult:
    try:
        typed = build_payload(event_type, payload)
    except ValidationError as e:
        logger.error(f"Rejected {event_type.value} event with invalid payload: {e}")
        return LogEventResult(success=False, error=f"Invalid payload for {event_type.value}")

    clean = typed.model_dump(mode="json", exclude_none=True)
    if "email_body" in clean:
        clean["email_body"] = clean["email_body"][:MAX_EMAIL_BODY_CHARS]

    row = {
        "conversation_id": conversation_id,
        "event_type": event_type.value,
        "subtype": subtype,
        "actor": actor,
        "payload": clean,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        inserted = await client.insert(EVENTS_TABLE, row)
    except Exception as e:
        logger.error(f"Failed to log {event_type.value} event: {e}")
        return LogEventResult(success=False, error=str(e))

    label = f"{event_type.value}:{subtype}" if subtype else event_type.value
    logger.info(f"Logged {label} for conversation {(conversation_id or 'none')[:8]}")
    return LogEventResult(success=True, event_id=inserted.get("id"))
