from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    SENT = "sent"
    REJECTED = "rejected"
    FAILED = "failed"


class DraftStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    REJECTED = "rejected"
    SENT = "sent"


class Quote(BaseModel):
    """Row written to the quotes table. Wholesale pricing: labor and margin stay zero."""

    id: Optional[str] = None
    quote_number: str
    organization_id: Optional[str] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    product_name: Optional[str] = None
    sqft: float
    price_per_sqft: float
    material_cost: float
    labor_cost: float = 0
    margin: float = 0
    total_price: float
    status: QuoteStatus = QuoteStatus.APPROVED
    email_sent: bool = False
    needs_review: bool = False
    source: Optional[str] = None
    ai_generated: bool = True
    source_conversation_id: Optional[str] = None
    source_message: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class QuoteDraft(BaseModel):
    """Row written to the quote_drafts table by actors without execution authority."""

    id: Optional[str] = None
    organization_id: Optional[str] = None
    source_agent: str
    confidence: float = 0.85
    customer_name: Optional[str] = None
    customer_email: str
    customer_phone: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    material: str
    sqft: float
    price_per_sqft: float
    total_price: float
    needs_review: bool = False
    size_source: Optional[str] = None
    status: DraftStatus = DraftStatus.DRAFT
    source: Optional[str] = None
    original_message: Optional[str] = None
    conversation_id: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    sent_at: Optional[str] = None
    rejected_reason: Optional[str] = None
