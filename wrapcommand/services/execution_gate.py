"""
Execution gate: conversation is not execution.

Channel agents may prepare intents (drafts) but only actors holding the
matching execution scope may finalize an externally visible action.
"""
import re
from typing import Dict, Iterable, Optional

from wrapcommand.core.logger import get_logger
from wrapcommand.models.agent import (
    AgentChannel,
    AgentProfile,
    ExecutionGateResult,
    ExecutionIntent,
    ExecutionScope,
    IntentType,
    IntentValidation,
)

logger = get_logger(__name__)

HUMAN_PREFIX = "user:"
LOW_CONFIDENCE_THRESHOLD = 0.7
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

ACTION_SCOPES: Dict[str, ExecutionScope] = {
    "create_quote": ExecutionScope.QUOTE,
    "send_quote": ExecutionScope.QUOTE,
    "execute_quote": ExecutionScope.QUOTE,
    "approve_quote": ExecutionScope.QUOTE,
    "create_order": ExecutionScope.ORDER,
    "publish_content": ExecutionScope.CONTENT,
    "post_content": ExecutionScope.CONTENT,
}


class AgentRegistry:
    """Immutable lookup of actors and their execution scope."""

    def __init__(self, agents: Iterable[AgentProfile]):
        self._agents: Dict[str, AgentProfile] = {a.id: a for a in agents}

    def get(self, actor_id: Optional[str]) -> Optional[AgentProfile]:
        if not actor_id:
            return None
        if actor_id.startswith(HUMAN_PREFIX) and len(actor_id) > len(HUMAN_PREFIX):
            return AgentProfile(
                id=actor_id,
                name="Human operator",
                channel=AgentChannel.INTERNAL,
                execution_scope=ExecutionScope.QUOTE,
                requires_approval=False,
            )
        return self._agents.get(actor_id)

    def scope_of(self, actor_id: Optional[str]) -> ExecutionScope:
        agent = self.get(actor_id)
        return agent.execution_scope if agent else ExecutionScope.NONE

    def __contains__(self, actor_id: str) -> bool:
        return self.get(actor_id) is not None


def default_agent_registry() -> AgentRegistry:
    return AgentRegistry([
        AgentProfile(id="luigi", name="Luigi", channel=AgentChannel.WEBSITE, requires_approval=False),
        AgentProfile(id="hello_email", name="Hello Agent", channel=AgentChannel.EMAIL,
                     inbox_email="hello@weprintwraps.com"),
        AgentProfile(id="design_email", name="Design Agent", channel=AgentChannel.EMAIL,
                     inbox_email="design@weprintwraps.com"),
        AgentProfile(id="jackson_email", name="Jackson Agent", channel=AgentChannel.EMAIL,
                     inbox_email="jackson@weprintwraps.com"),
        AgentProfile(id="instagram", name="Instagram Agent", channel=AgentChannel.INSTAGRAM,
                     requires_approval=False),
        AgentProfile(id="mightytask", name="MightyTask Agent", channel=AgentChannel.INTERNAL),
        AgentProfile(id="ops_desk", name="Ops Desk", channel=AgentChannel.INTERNAL,
                     execution_scope=ExecutionScope.QUOTE, requires_approval=False),
    ])


def can_execute(actor_id: str, scope: ExecutionScope, registry: AgentRegistry) -> bool:
    actor_scope = registry.scope_of(actor_id)
    return actor_scope != ExecutionScope.NONE and actor_scope == scope


def enforce_execution_gate(actor_id: str, action_name: str, registry: AgentRegistry) -> ExecutionGateResult:
    required = ACTION_SCOPES.get(action_name)
    if required is None:
        return ExecutionGateResult(proceed=True)

    if can_execute(actor_id, required, registry):
        return ExecutionGateResult(proceed=True)

    reason = f"Agent {actor_id} lacks {required.value} execution authority. Routing to executor."
    logger.info(f"Execution gate blocked {action_name} for {actor_id}")
    return ExecutionGateResult(proceed=False, convert_to_pending=True, reason=reason)


def can_create_intent(actor_id: str, intent_type: IntentType, registry: AgentRegistry) -> bool:
    if actor_id not in registry:
        return False
    if intent_type.value.endswith("_READY") or intent_type == IntentType.ESCALATION:
        return True
    if intent_type.value.startswith("EXECUTE_"):
        scope = ExecutionScope(intent_type.value.replace("EXECUTE_", "").lower())
        return can_execute(actor_id, scope, registry)
    return False


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_intent(intent: ExecutionIntent, registry: AgentRegistry) -> IntentValidation:
    errors = []
    warnings = []

    if intent.source_agent not in registry:
        return IntentValidation(valid=False, errors=[f"Unknown source agent: {intent.source_agent}"])

    if intent.confidence < LOW_CONFIDENCE_THRESHOLD:
        warnings.append(f"Low confidence: {intent.confidence}. Consider requesting clarification.")

    if intent.intent in (IntentType.QUOTE_READY, IntentType.EXECUTE_QUOTE):
        contact = intent.data.get("contact") or {}
        vehicle = intent.data.get("vehicle") or {}
        email = contact.get("email")
        if not email:
            errors.append("Missing customer email - required for quote")
        elif not is_valid_email(email):
            errors.append(f"Invalid email format: {email}")
        if not vehicle.get("make"):
            errors.append("Missing vehicle make - required for quote")
        if not vehicle.get("model"):
            errors.append("Missing vehicle model - required for quote")
        sqft = intent.data.get("sqft")
        if not isinstance(sqft, (int, float)) or sqft <= 0:
            errors.append("Invalid SQFT - must be positive number")

    if intent.intent in (IntentType.CONTENT_READY, IntentType.EXECUTE_CONTENT):
        if not intent.data.get("artifact_type"):
            errors.append("Missing artifact_type for content intent")
        if not intent.data.get("channel"):
            errors.append("Missing channel for content intent")

    return IntentValidation(valid=not errors, errors=errors, warnings=warnings)


def executor_for_intent(intent: ExecutionIntent) -> Optional[str]:
    if intent.intent in (IntentType.QUOTE_READY, IntentType.EXECUTE_QUOTE):
        return "ops_desk"
    return None
