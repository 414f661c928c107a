from fastapi import APIRouter, Depends

from wrapcommand.core.dependencies import (
    get_agent_registry,
    get_catalog,
    get_price_table,
    get_resend_mailer,
    get_supabase,
)
from wrapcommand.core.logger import get_logger
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
from wrapcommand.services import quote_service
from wrapcommand.services.email_service import ResendMailer
from wrapcommand.services.execution_gate import AgentRegistry
from wrapcommand.services.pricing_service import PriceTable
from wrapcommand.services.supabase_service import SupabaseClient
from wrapcommand.services.vehicle_size_service import VehicleCatalog

quote_router = APIRouter(tags=["Quote"])

logger = get_logger(__name__)


@quote_router.post("/create-quote-from-chat", response_model=CreateQuoteResponse)
async def create_quote_from_chat(
    payload: CreateQuoteFromChatRequest,
    client: SupabaseClient = Depends(get_supabase),
    mailer: ResendMailer = Depends(get_resend_mailer),
    catalog: VehicleCatalog = Depends(get_catalog),
    price_table: PriceTable = Depends(get_price_table),
):
    logger.info(f"Chat quote requested for conversation {payload.conversation_id}")
    return await quote_service.create_quote_from_chat(payload, client, mailer, catalog, price_table)


@quote_router.post("/create-quote-draft", response_model=DraftCreatedResponse)
async def create_quote_draft(
    payload: CreateQuoteDraftRequest,
    client: SupabaseClient = Depends(get_supabase),
    catalog: VehicleCatalog = Depends(get_catalog),
    price_table: PriceTable = Depends(get_price_table),
    registry: AgentRegistry = Depends(get_agent_registry),
):
    logger.info(f"Quote draft requested by {payload.source_agent}")
    return await quote_service.create_quote_draft(payload, client, catalog, price_table, registry)


@quote_router.post("/execute-quote-draft", response_model=ExecuteDraftResponse)
async def execute_quote_draft(
    payload: ExecuteQuoteDraftRequest,
    client: SupabaseClient = Depends(get_supabase),
    mailer: ResendMailer = Depends(get_resend_mailer),
    registry: AgentRegistry = Depends(get_agent_registry),
):
    logger.info(f"Execution of draft {payload.draft_id} requested by {payload.approving_agent}")
    return await quote_service.execute_quote_draft(payload, client, mailer, registry)


@quote_router.post("/reject-quote-draft", response_model=RejectDraftResponse)
async def reject_quote_draft(
    payload: RejectQuoteDraftRequest,
    client: SupabaseClient = Depends(get_supabase),
    registry: AgentRegistry = Depends(get_agent_registry),
):
    logger.info(f"Rejection of draft {payload.draft_id} requested by {payload.rejecting_agent}")
    return await quote_service.reject_quote_draft(payload, client, registry)
