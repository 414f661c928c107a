from typing import Any, Dict, List, Sequence

from wrapcommand.core.logger import get_logger
from wrapcommand.models.vehicle import VehicleSizeEntry, VehicleSyncResponse
from wrapcommand.services.supabase_service import SupabaseClient

logger = get_logger("vehicle_sync_service")

VEHICLE_TABLE = "vehicle_dimensions"


def to_row(entry: VehicleSizeEntry) -> Dict[str, Any]:
    return {
        "make": entry.make,
        "model": entry.model,
        "year_start": entry.year_start,
        "year_end": entry.year_end,
        "side_sqft": entry.side_sqft,
        "back_sqft": entry.back_sqft,
        "hood_sqft": entry.hood_sqft,
        "roof_sqft": entry.roof_sqft,
        "corrected_sqft": entry.total_sqft,
    }


async def sync_vehicle_dimensions(
    client: SupabaseClient,
    entries: Sequence[VehicleSizeEntry],
    batch_size: int = 200,
) -> VehicleSyncResponse:
    """
    Replace the vehicle_dimensions table with the given entries.

    Deletes every row, then inserts in fixed-size batches. Not transactional:
    a failure mid-way leaves the table partially populated and the error
    propagates to the caller.
    """
    rows: List[Dict[str, Any]] = [to_row(e) for e in entries]
    logger.info(f"Syncing {len(rows)} vehicles into {VEHICLE_TABLE}")

    await client.delete_all(VEHICLE_TABLE)

    inserted = 0
    for start in range(0, len(rows), batch_size):
        batch = rows[start:start + batch_size]
        inserted += await client.insert_many(VEHICLE_TABLE, batch)
        logger.info(f"Inserted batch {start // batch_size + 1}: {inserted}/{len(rows)}")

    return VehicleSyncResponse(
        success=True,
        message=f"Synced {inserted} vehicles to database",
        count=inserted,
    )
