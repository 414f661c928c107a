from fastapi import APIRouter, Depends

from wrapcommand.core.config import settings
from wrapcommand.core.dependencies import get_catalog, get_price_table, get_supabase
from wrapcommand.core.errors import PersistenceFailed, SupabaseError
from wrapcommand.core.logger import get_logger
from wrapcommand.data.vehicle_reference import VEHICLE_DIMENSIONS
from wrapcommand.models.vehicle import VehicleSqftRequest, VehicleSqftResponse, VehicleSyncResponse
from wrapcommand.services.email_templates import vehicle_label
from wrapcommand.services.pricing_service import PriceTable, calculate_quick_quote
from wrapcommand.services.supabase_service import SupabaseClient
from wrapcommand.services.vehicle_size_service import VehicleCatalog, parse_dimension_rows, resolve_size
from wrapcommand.services.vehicle_sync_service import sync_vehicle_dimensions

vehicle_router = APIRouter(tags=["Vehicle"])
logger = get_logger(__name__)


@vehicle_router.post("/vehicle-sqft", response_model=VehicleSqftResponse)
async def vehicle_sqft(
    payload: VehicleSqftRequest,
    catalog: VehicleCatalog = Depends(get_catalog),
    price_table: PriceTable = Depends(get_price_table),
):
    size = resolve_size(payload.vehicle_make, payload.vehicle_model, payload.vehicle_year, catalog)
    priced = calculate_quick_quote(size.sqft, payload.product_type, price_table)

    return VehicleSqftResponse(
        vehicle=vehicle_label(payload.vehicle_year, payload.vehicle_make, payload.vehicle_model),
        sqft=size.sqft,
        source=size.source,
        needs_review=size.needs_review,
        matched_key=size.matched_key,
        category=size.category,
        default_wrap_sqft=size.default_wrap_sqft,
        price_per_sqft=priced.price_per_sqft,
        material_cost=priced.material_cost,
        product_name=priced.product_name,
    )


@vehicle_router.post("/sync-all-vehicles", response_model=VehicleSyncResponse)
async def sync_all_vehicles(client: SupabaseClient = Depends(get_supabase)):
    entries = parse_dimension_rows(VEHICLE_DIMENSIONS)
    try:
        return await sync_vehicle_dimensions(client, entries, settings.VEHICLE_SYNC_BATCH_SIZE)
    except SupabaseError as e:
        logger.error(f"Vehicle sync failed: {e}")
        raise PersistenceFailed("Vehicle sync failed", e.code) from e
