from enum import Enum
from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, ConfigDict


class ConversationEventType(str, Enum):
    MESSAGE_RECEIVED = "message_received"
    ESCALATION_SENT = "escalation_sent"
    ESCALATION_BLOCKED = "escalation_blocked"
    EMAIL_SENT = "email_sent"
    EMAIL_DRAFTED = "email_drafted"
    AI_RESPONSE_SENT = "ai_response_sent"
    QUOTE_DRAFTED = "quote_drafted"
    QUOTE_ATTACHED = "quote_attached"
    MARKED_NO_QUOTE_REQUIRED = "marked_no_quote_required"
    ASSET_UPLOADED = "asset_uploaded"
    ASSET_REVIEW_REQUIRED = "asset_review_required"
    ASSET_REVIEWED = "asset_reviewed"
    MARKED_COMPLETE = "marked_complete"
    CLASSIFICATION_COMPLETED = "classification_completed"
    CALL_REQUESTED = "call_requested"
    CALL_SCHEDULED = "call_scheduled"
    CALL_COMPLETED = "call_completed"
    FAILED = "failed"


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class QuotePayload(EventPayload):
    quote_id: Optional[str] = None
    quote_number: Optional[str] = None
    draft_id: Optional[str] = None
    quote_total: Optional[float] = None
    sqft: Optional[float] = None
    needs_review: Optional[bool] = None


class EmailPayload(EventPayload):
    email_sent_to: List[str]
    email_subject: str
    email_body: Optional[str] = None
    email_sent_at: Optional[str] = None
    quote_id: Optional[str] = None


class EscalationPayload(EventPayload):
    escalation_target: Optional[str] = None
    escalation_type: Optional[str] = None
    priority: Optional[str] = None
    reason: Optional[str] = None
    message_excerpt: Optional[str] = None


class FailurePayload(EventPayload):
    error: str
    step: Optional[str] = None
    quote_id: Optional[str] = None


class NotePayload(EventPayload):
    reason: Optional[str] = None
    quote_id: Optional[str] = None
    draft_id: Optional[str] = None
    message_excerpt: Optional[str] = None


EVENT_PAYLOAD_TYPES: Dict[ConversationEventType, Type[EventPayload]] = {
    ConversationEventType.QUOTE_DRAFTED: QuotePayload,
    ConversationEventType.QUOTE_ATTACHED: QuotePayload,
    ConversationEventType.EMAIL_SENT: EmailPayload,
    ConversationEventType.EMAIL_DRAFTED: EmailPayload,
    ConversationEventType.ESCALATION_SENT: EscalationPayload,
    ConversationEventType.ESCALATION_BLOCKED: EscalationPayload,
    ConversationEventType.FAILED: FailurePayload,
}


def payload_type_for(event_type: ConversationEventType) -> Type[EventPayload]:
    return EVENT_PAYLOAD_TYPES.get(event_type, NotePayload)


class LogEventResult(BaseModel):
    success: bool
    event_id: Optional[str] = None
    error: Optional[str] = None
