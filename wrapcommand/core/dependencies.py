from fastapi import Request

from wrapcommand.services.email_service import ResendMailer, get_mailer
from wrapcommand.services.execution_gate import AgentRegistry
from wrapcommand.services.pricing_service import PriceTable
from wrapcommand.services.supabase_service import SupabaseClient, get_supabase_client
from wrapcommand.services.vehicle_size_service import VehicleCatalog


def get_catalog(request: Request) -> VehicleCatalog:
    return request.app.state.catalog


def get_price_table(request: Request) -> PriceTable:
    return request.app.state.price_table


def get_agent_registry(request: Request) -> AgentRegistry:
    return request.app.state.agent_registry


def get_supabase() -> SupabaseClient:
    return get_supabase_client()


def get_resend_mailer() -> ResendMailer:
    return get_mailer()
