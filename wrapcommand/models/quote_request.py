from typing import Optional
from pydantic import BaseModel, Field


class CreateQuoteFromChatRequest(BaseModel):
    conversation_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    product_type: str = "avery"
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_price: Optional[float] = Field(None, description="Per-sqft price overriding the price table")
    send_email: bool = True
    enroll_followup_sequence: bool = False
    organization_id: Optional[str] = None


class CreateQuoteDraftRequest(BaseModel):
    source_agent: Optional[str] = None
    confidence: float = Field(0.85, ge=0.0, le=1.0)
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    product_type: str = "avery"
    material: Optional[str] = None
    original_message: Optional[str] = None
    source: str = "agent"
    conversation_id: Optional[str] = None
    organization_id: Optional[str] = None


class ExecuteQuoteDraftRequest(BaseModel):
    draft_id: Optional[str] = None
    approving_agent: str = "ops_desk"
    approved_by_user_id: Optional[str] = None


class RejectQuoteDraftRequest(BaseModel):
    draft_id: Optional[str] = None
    rejecting_agent: str = "ops_desk"
    rejected_by_user_id: Optional[str] = None
    reason: Optional[str] = None
