import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from wrapcommand.core.config import settings
from wrapcommand.core.errors import (
    DraftAlreadyProcessed,
    DraftNotFound,
    ExecutionForbidden,
    PersistenceFailed,
    RequestInvalid,
    SupabaseError,
)
from wrapcommand.core.logger import get_logger
from wrapcommand.models.agent import ExecutionIntent, IntentType
from wrapcommand.models.events import (
    ConversationEventType,
    EmailPayload,
    FailurePayload,
    NotePayload,
    QuotePayload,
)
from wrapcommand.models.quote import DraftStatus, Quote, QuoteDraft, QuoteStatus
from wrapcommand.models.quote_request import (
    CreateQuoteDraftRequest,
    CreateQuoteFromChatRequest,
    ExecuteQuoteDraftRequest,
    RejectQuoteDraftRequest,
)
from wrapcommand.models.quote_response import (
    CreateQuoteResponse,
    DraftCreatedResponse,
    ExecuteDraftResponse,
    RejectDraftResponse,
)
from wrapcommand.services.conversation_events import MAX_EMAIL_BODY_CHARS, log_conversation_event
from wrapcommand.services.email_service import ResendMailer, is_deliverable_email
from wrapcommand.services.email_templates import quote_email_subject, render_quote_email, vehicle_label
from wrapcommand.services.execution_gate import (
    AgentRegistry,
    enforce_execution_gate,
    executor_for_intent,
    is_valid_email,
    validate_intent,
)
from wrapcommand.services.pricing_service import PriceTable, apply_volume_discount, calculate_quick_quote
from wrapcommand.services.supabase_service import SupabaseClient
from wrapcommand.services.vehicle_size_service import VehicleCatalog, resolve_size

logger = get_logger("quote_service")

QUOTES_TABLE = "quotes"
DRAFTS_TABLE = "quote_drafts"
AI_ACTIONS_TABLE = "ai_actions"
TASKS_TABLE = "tasks"
CONVERSATIONS_TABLE = "conversations"
ENROLLMENTS_TABLE = "email_sequence_enrollments"

QUOTE_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
FOLLOWUP_SEQUENCE = "quote_followup"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_quote_number(now: Optional[datetime] = None) -> str:
    """WPW-YYMMDD-XXXX, the suffix drawn from uppercase letters and digits."""
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(QUOTE_NUMBER_ALPHABET) for _ in range(4))
    return f"WPW-{now.strftime('%y%m%d')}-{suffix}"


async def _insert_or_fail(client: SupabaseClient, table: str, row: Dict[str, Any], error: str) -> Dict[str, Any]:
    try:
        inserted = await client.insert(table, row)
    except SupabaseError as e:
        logger.error(f"{error}: {e}")
        raise PersistenceFailed(error, e.code) from e
    if not inserted.get("id"):
        raise PersistenceFailed(error)
    return inserted


async def _send_quote_email(
    client: SupabaseClient,
    mailer: ResendMailer,
    conversation_id: Optional[str],
    actor: str,
    quote_id: str,
    quote_number: str,
    customer_email: str,
    customer_name: Optional[str],
    vehicle: str,
    product_name: str,
    sqft: float,
    price_per_sqft: float,
    total: float,
    needs_review: bool,
) -> bool:
    """Render and send the quote email. Returns False instead of raising when delivery fails."""
    if not mailer.is_configured:
        logger.warning(f"Mailer not configured, quote {quote_number} not emailed")
        return False

    subject = quote_email_subject(quote_number, vehicle)
    html = render_quote_email(
        quote_id=quote_id,
        quote_number=quote_number,
        customer_name=customer_name,
        vehicle=vehicle,
        product_name=product_name,
        sqft=sqft,
        price_per_sqft=price_per_sqft,
        total=total,
        needs_review=needs_review,
    )
    try:
        await mailer.send([customer_email], subject, html)
    except Exception as e:
        logger.error(f"Quote email for {quote_number} failed: {e!r}")
        await log_conversation_event(
            client,
            conversation_id,
            ConversationEventType.FAILED,
            actor,
            FailurePayload(error=str(e) or type(e).__name__, step="send_quote_email", quote_id=quote_id, customer_email=customer_email),
            subtype="email",
        )
        return False

    await log_conversation_event(
        client,
        conversation_id,
        ConversationEventType.EMAIL_SENT,
        actor,
        EmailPayload(
            email_sent_to=[customer_email],
            email_subject=subject,
            email_body=html[:MAX_EMAIL_BODY_CHARS],
            email_sent_at=_now(),
            quote_id=quote_id,
        ),
        subtype="quote",
    )
    return True


async def _best_effort(description: str, coro) -> None:
    try:
        await coro
    except Exception:
        logger.exception(f"{description} failed")


def _followup_task(quote_id: str, quote_number: str, req: CreateQuoteFromChatRequest, vehicle: str,
                   sqft: float, material_cost: float, organization_id: str) -> Dict[str, Any]:
    high = material_cost > settings.FOLLOWUP_HIGH_PRIORITY_THRESHOLD
    due = datetime.now(timezone.utc) + timedelta(days=settings.FOLLOWUP_DUE_DAYS)
    return {
        "title": f"Quote Follow-Up: {vehicle} - ${material_cost:.2f}",
        "description": (
            f"Chat quote {quote_number} for {req.customer_email}. Vehicle: {vehicle} ({sqft:g} sqft). "
            f"Material: ${material_cost:.2f}. Follow up to close!"
        ),
        "status": "pending",
        "priority": "high" if high else "medium",
        "assigned_to": settings.FOLLOWUP_OWNER,
        "due_date": due.isoformat(),
        "organization_id": organization_id,
        "metadata": {
            "type": "quote_followup",
            "quote_id": quote_id,
            "quote_number": quote_number,
            "customer_email": req.customer_email,
            "conversation_id": req.conversation_id,
            "material_cost": material_cost,
        },
    }


async def create_quote_from_chat(
    req: CreateQuoteFromChatRequest,
    client: SupabaseClient,
    mailer: ResendMailer,
    catalog: VehicleCatalog,
    price_table: PriceTable,
) -> CreateQuoteResponse:
    if not req.customer_email or not req.customer_email.strip():
        raise RequestInvalid("Customer email required")

    logger.info(f"Creating chat quote for {req.customer_email}: {req.vehicle_year} {req.vehicle_make} {req.vehicle_model}")

    size = resolve_size(req.vehicle_make, req.vehicle_model, req.vehicle_year, catalog)
    priced = calculate_quick_quote(size.sqft, req.product_type, price_table, req.product_price, req.product_name)
    material_cost = apply_volume_discount(priced.material_cost)
    organization_id = req.organization_id or settings.DEFAULT_ORGANIZATION_ID
    vehicle = vehicle_label(req.vehicle_year, req.vehicle_make, req.vehicle_model)
    quote_number = generate_quote_number()

    quote = Quote(
        quote_number=quote_number,
        organization_id=organization_id,
        customer_name=req.customer_name or f"Website Lead ({req.customer_email})",
        customer_email=req.customer_email,
        customer_phone=req.customer_phone,
        vehicle_year=req.vehicle_year,
        vehicle_make=req.vehicle_make,
        vehicle_model=req.vehicle_model,
        product_name=priced.product_name,
        sqft=size.sqft,
        price_per_sqft=priced.price_per_sqft,
        material_cost=material_cost,
        total_price=material_cost,
        status=QuoteStatus.APPROVED,
        needs_review=size.needs_review,
        source="website_chat",
        source_conversation_id=req.conversation_id,
        metadata={
            "created_via": "create_quote_from_chat",
            "product_type": req.product_type,
            "product_id": req.product_id,
            "size_source": size.source.value,
            "matched_key": size.matched_key,
        },
    )
    row = await _insert_or_fail(
        client, QUOTES_TABLE, quote.model_dump(mode="json", exclude={"id"}), "Failed to create quote"
    )
    quote_id = row["id"]
    logger.info(f"Quote {quote_number} created with id {quote_id}")

    await log_conversation_event(
        client,
        req.conversation_id,
        ConversationEventType.QUOTE_DRAFTED,
        "create_quote_from_chat",
        QuotePayload(
            quote_id=quote_id,
            quote_number=quote_number,
            quote_total=material_cost,
            sqft=size.sqft,
            needs_review=size.needs_review,
            customer_email=req.customer_email,
            customer_name=req.customer_name,
        ),
    )

    email_sent = False
    if not req.send_email:
        logger.info(f"Email disabled for quote {quote_number}")
    elif not is_deliverable_email(req.customer_email):
        logger.info(f"Skipping email for placeholder address {req.customer_email}")
    else:
        email_sent = await _send_quote_email(
            client, mailer, req.conversation_id, "create_quote_from_chat",
            quote_id, quote_number, req.customer_email, req.customer_name, vehicle,
            priced.product_name, size.sqft, priced.price_per_sqft, material_cost, size.needs_review,
        )

    if email_sent:
        await _best_effort(
            "Quote status update",
            client.update(QUOTES_TABLE, {"id": quote_id}, {"status": QuoteStatus.SENT.value, "email_sent": True}),
        )

    if req.conversation_id:
        await _best_effort(
            "Conversation update",
            client.update(CONVERSATIONS_TABLE, {"id": req.conversation_id}, {
                "chat_state": {
                    "quote_id": quote_id,
                    "quote_number": quote_number,
                    "quote_sent": email_sent,
                    "quote_sent_at": _now() if email_sent else None,
                },
                "status": "quote_sent" if email_sent else "quoted",
            }),
        )

    await _best_effort(
        "Follow-up task creation",
        client.insert(TASKS_TABLE, _followup_task(
            quote_id, quote_number, req, vehicle, size.sqft, material_cost, organization_id
        )),
    )

    if req.enroll_followup_sequence and is_deliverable_email(req.customer_email):
        await _best_effort(
            "Follow-up sequence enrollment",
            client.insert(ENROLLMENTS_TABLE, {
                "quote_id": quote_id,
                "customer_email": req.customer_email,
                "customer_name": req.customer_name,
                "sequence": FOLLOWUP_SEQUENCE,
                "status": "active",
                "organization_id": organization_id,
                "enrolled_at": _now(),
            }),
        )

    await _best_effort(
        "AI action log",
        client.insert(AI_ACTIONS_TABLE, {
            "action_type": "quote_created_from_chat",
            "action_payload": {
                "quote_id": quote_id,
                "quote_number": quote_number,
                "customer_email": req.customer_email,
                "vehicle": vehicle,
                "sqft": size.sqft,
                "material_cost": material_cost,
                "email_sent": email_sent,
                "needs_review": size.needs_review,
                "conversation_id": req.conversation_id,
            },
            "organization_id": organization_id,
            "priority": "normal",
            "resolved": True,
            "resolved_at": _now(),
        }),
    )

    message = f"Quote created and {'sent to ' + req.customer_email if email_sent else 'ready for review'}"
    if size.needs_review:
        message += f". Vehicle size is an estimate ({size.source.value}); manual review required."

    return CreateQuoteResponse(
        quote_id=quote_id,
        quote_number=quote_number,
        sqft=size.sqft,
        material_cost=material_cost,
        price_per_sqft=priced.price_per_sqft,
        email_sent=email_sent,
        needs_review=size.needs_review,
        message=message,
    )


async def create_quote_draft(
    req: CreateQuoteDraftRequest,
    client: SupabaseClient,
    catalog: VehicleCatalog,
    price_table: PriceTable,
    registry: AgentRegistry,
) -> DraftCreatedResponse:
    """
    Record a quote an agent has prepared but may not send.

    Only an unknown agent or a missing/malformed email rejects the request;
    other intent problems become warnings and flag the draft for review.
    """
    if not req.source_agent:
        raise RequestInvalid("source_agent required")
    if req.source_agent not in registry:
        raise RequestInvalid(f"Unknown source agent: {req.source_agent}")
    if not req.customer_email:
        raise RequestInvalid("Customer email required")
    if not is_valid_email(req.customer_email):
        raise RequestInvalid(f"Invalid email format: {req.customer_email}")

    size = resolve_size(req.vehicle_make, req.vehicle_model, req.vehicle_year, catalog)
    priced = calculate_quick_quote(size.sqft, req.material or req.product_type, price_table)
    total = apply_volume_discount(priced.material_cost)

    intent = ExecutionIntent(
        intent=IntentType.QUOTE_READY,
        confidence=req.confidence,
        source_agent=req.source_agent,
        data={
            "contact": {"email": req.customer_email, "name": req.customer_name},
            "vehicle": {"year": req.vehicle_year, "make": req.vehicle_make, "model": req.vehicle_model},
            "sqft": size.sqft,
        },
    )
    validation = validate_intent(intent, registry)
    warnings = list(validation.warnings) + list(validation.errors)
    needs_review = size.needs_review or not validation.valid

    gate = enforce_execution_gate(req.source_agent, "create_quote", registry)
    logger.info(f"Draft gate for {req.source_agent}: proceed={gate.proceed}")

    draft = QuoteDraft(
        organization_id=req.organization_id or settings.DEFAULT_ORGANIZATION_ID,
        source_agent=req.source_agent,
        confidence=req.confidence,
        customer_name=req.customer_name,
        customer_email=req.customer_email,
        customer_phone=req.customer_phone,
        vehicle_year=req.vehicle_year,
        vehicle_make=req.vehicle_make,
        vehicle_model=req.vehicle_model,
        material=priced.product_name,
        sqft=size.sqft,
        price_per_sqft=priced.price_per_sqft,
        total_price=total,
        needs_review=needs_review,
        size_source=size.source.value,
        status=DraftStatus.DRAFT,
        source=req.source,
        original_message=req.original_message,
        conversation_id=req.conversation_id,
    )
    row = await _insert_or_fail(
        client, DRAFTS_TABLE, draft.model_dump(mode="json", exclude={"id"}), "Failed to create quote draft"
    )
    draft_id = row["id"]
    logger.info(f"Quote draft {draft_id} created by {req.source_agent}")

    await log_conversation_event(
        client,
        req.conversation_id,
        ConversationEventType.QUOTE_DRAFTED,
        req.source_agent,
        QuotePayload(
            draft_id=draft_id,
            quote_total=total,
            sqft=size.sqft,
            needs_review=needs_review,
            customer_email=req.customer_email,
            customer_name=req.customer_name,
        ),
        subtype="draft",
    )

    executor = executor_for_intent(intent)
    await _best_effort(
        "Draft approval action",
        client.insert(AI_ACTIONS_TABLE, {
            "action_type": "quote_draft_ready",
            "action_payload": {
                "draft_id": draft_id,
                "source_agent": req.source_agent,
                "customer_email": req.customer_email,
                "vehicle": vehicle_label(req.vehicle_year, req.vehicle_make, req.vehicle_model),
                "total_price": total,
                "executor": executor,
            },
            "organization_id": draft.organization_id,
            "priority": "high" if needs_review else "normal",
            "resolved": False,
        }),
    )

    return DraftCreatedResponse(
        draft_id=draft_id,
        draft=row,
        message=f"Quote draft created for {req.customer_email}. Awaiting approval from {executor}.",
        gate_result=gate,
        warnings=warnings,
    )


async def _load_open_draft(client: SupabaseClient, draft_id: str) -> QuoteDraft:
    try:
        row = await client.select_one(DRAFTS_TABLE, {"id": draft_id})
    except SupabaseError as e:
        raise PersistenceFailed("Failed to load quote draft", e.code) from e
    if row is None:
        raise DraftNotFound(draft_id)
    draft = QuoteDraft.model_validate(row)
    if draft.status != DraftStatus.DRAFT:
        raise DraftAlreadyProcessed(draft.status.value)
    return draft


async def execute_quote_draft(
    req: ExecuteQuoteDraftRequest,
    client: SupabaseClient,
    mailer: ResendMailer,
    registry: AgentRegistry,
) -> ExecuteDraftResponse:
    if not req.draft_id:
        raise RequestInvalid("Missing draft_id")

    gate = enforce_execution_gate(req.approving_agent, "execute_quote", registry)
    if not gate.proceed:
        logger.warning(f"{req.approving_agent} refused execution of draft {req.draft_id}: {gate.reason}")
        raise ExecutionForbidden(
            "Forbidden - Agent not authorized for quote execution", gate.reason, gate.convert_to_pending
        )

    draft = await _load_open_draft(client, req.draft_id)
    approver = req.approved_by_user_id or req.approving_agent
    quote_number = generate_quote_number()

    quote = Quote(
        quote_number=quote_number,
        organization_id=draft.organization_id,
        customer_name=draft.customer_name or "Unknown",
        customer_email=draft.customer_email,
        customer_phone=draft.customer_phone,
        vehicle_year=draft.vehicle_year,
        vehicle_make=draft.vehicle_make,
        vehicle_model=draft.vehicle_model,
        product_name=draft.material,
        sqft=draft.sqft,
        price_per_sqft=draft.price_per_sqft,
        material_cost=draft.total_price,
        total_price=draft.total_price,
        status=QuoteStatus.APPROVED,
        needs_review=draft.needs_review,
        source=draft.source,
        source_conversation_id=draft.conversation_id,
        source_message=draft.original_message,
        metadata={"draft_id": req.draft_id, "approved_by": approver},
    )
    row = await _insert_or_fail(
        client, QUOTES_TABLE, quote.model_dump(mode="json", exclude={"id"}), "Failed to create quote"
    )
    quote_id = row["id"]
    logger.info(f"Draft {req.draft_id} promoted to quote {quote_number} by {approver}")

    await log_conversation_event(
        client,
        draft.conversation_id,
        ConversationEventType.QUOTE_ATTACHED,
        approver,
        QuotePayload(
            quote_id=quote_id,
            quote_number=quote_number,
            draft_id=req.draft_id,
            quote_total=draft.total_price,
            sqft=draft.sqft,
            customer_email=draft.customer_email,
            customer_name=draft.customer_name,
        ),
    )

    email_sent = False
    if is_deliverable_email(draft.customer_email):
        email_sent = await _send_quote_email(
            client, mailer, draft.conversation_id, approver,
            quote_id, quote_number, draft.customer_email, draft.customer_name,
            vehicle_label(draft.vehicle_year, draft.vehicle_make, draft.vehicle_model),
            draft.material, draft.sqft, draft.price_per_sqft, draft.total_price, draft.needs_review,
        )

    status = QuoteStatus.SENT if email_sent else QuoteStatus.APPROVED
    now = _now()
    await _best_effort(
        "Quote status update",
        client.update(QUOTES_TABLE, {"id": quote_id}, {"status": status.value, "email_sent": email_sent}),
    )
    await _best_effort(
        "Draft status update",
        client.update(DRAFTS_TABLE, {"id": req.draft_id}, {
            "status": DraftStatus.SENT.value if email_sent else DraftStatus.APPROVED.value,
            "approved_by": req.approved_by_user_id,
            "approved_at": now,
            "sent_at": now if email_sent else None,
        }),
    )
    await _best_effort(
        "AI action resolution",
        client.update(AI_ACTIONS_TABLE, {"action_payload->>draft_id": req.draft_id}, {
            "resolved": True,
            "resolved_at": now,
            "resolved_by": req.approved_by_user_id or "ops_desk",
        }),
    )

    return ExecuteDraftResponse(
        status=status.value,
        quote_id=quote_id,
        quote_number=quote_number,
        email_sent=email_sent,
        email_to=draft.customer_email if email_sent else None,
        message=(
            f"Quote approved and sent to {draft.customer_email}"
            if email_sent else "Quote approved (no valid email to send)"
        ),
    )


async def reject_quote_draft(
    req: RejectQuoteDraftRequest,
    client: SupabaseClient,
    registry: AgentRegistry,
) -> RejectDraftResponse:
    if not req.draft_id:
        raise RequestInvalid("Missing draft_id")

    gate = enforce_execution_gate(req.rejecting_agent, "approve_quote", registry)
    if not gate.proceed:
        raise ExecutionForbidden(
            "Forbidden - Agent not authorized to reject quote drafts", gate.reason, gate.convert_to_pending
        )

    draft = await _load_open_draft(client, req.draft_id)
    rejected_by = req.rejected_by_user_id or req.rejecting_agent
    try:
        await client.update(DRAFTS_TABLE, {"id": req.draft_id}, {
            "status": DraftStatus.REJECTED.value,
            "rejected_reason": req.reason,
            "approved_by": req.rejected_by_user_id,
            "approved_at": _now(),
        })
    except SupabaseError as e:
        raise PersistenceFailed("Failed to reject quote draft", e.code) from e
    logger.info(f"Draft {req.draft_id} rejected by {rejected_by}")

    await log_conversation_event(
        client,
        draft.conversation_id,
        ConversationEventType.MARKED_COMPLETE,
        rejected_by,
        NotePayload(
            reason=req.reason or "Quote draft rejected",
            draft_id=req.draft_id,
            customer_email=draft.customer_email,
        ),
        subtype="draft_rejected",
    )
    await _best_effort(
        "AI action resolution",
        client.update(AI_ACTIONS_TABLE, {"action_payload->>draft_id": req.draft_id}, {
            "resolved": True,
            "resolved_at": _now(),
            "resolved_by": rejected_by,
        }),
    )

    return RejectDraftResponse(draft_id=req.draft_id, message=f"Quote draft {req.draft_id} rejected")
