from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from wrapcommand.models.agent import ExecutionGateResult


class CreateQuoteResponse(BaseModel):
    success: bool = True
    quote_id: str
    quote_number: str
    sqft: float
    material_cost: float
    price_per_sqft: float
    email_sent: bool
    needs_review: bool = False
    message: str


class DraftCreatedResponse(BaseModel):
    success: bool = True
    status: str = "draft_created"
    draft_id: str
    draft: Dict[str, Any]
    message: str
    gate_result: ExecutionGateResult
    warnings: List[str] = []


class ExecuteDraftResponse(BaseModel):
    success: bool = True
    status: str
    quote_id: str
    quote_number: str
    email_sent: bool
    email_to: Optional[str] = None
    message: str


class RejectDraftResponse(BaseModel):
    success: bool = True
    status: str = "rejected"
    draft_id: str
    message: str
