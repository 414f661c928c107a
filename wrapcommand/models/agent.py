from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field


class ExecutionScope(str, Enum):
    NONE = "none"
    QUOTE = "quote"
    ORDER = "order"
    CONTENT = "content"


class AgentChannel(str, Enum):
    EMAIL = "email"
    INSTAGRAM = "instagram"
    WEBSITE = "website"
    SMS = "sms"
    INTERNAL = "internal"


class AgentProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    channel: AgentChannel
    execution_scope: ExecutionScope = ExecutionScope.NONE
    inbox_email: Optional[str] = None
    requires_approval: bool = True


class ExecutionGateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    proceed: bool
    convert_to_pending: bool = False
    reason: Optional[str] = None


class IntentType(str, Enum):
    QUOTE_READY = "QUOTE_READY"
    EXECUTE_QUOTE = "EXECUTE_QUOTE"
    CONTENT_READY = "CONTENT_READY"
    EXECUTE_CONTENT = "EXECUTE_CONTENT"
    TASK_READY = "TASK_READY"
    ESCALATION = "ESCALATION"


class ExecutionIntent(BaseModel):
    intent: IntentType
    confidence: float = Field(0.85, ge=0.0, le=1.0)
    source_agent: str
    data: Dict[str, Any] = Field(default_factory=dict)
    verified: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IntentValidation(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
