import httpx
from typing import Any, Dict, List, Optional

from wrapcommand.core.config import settings
from wrapcommand.core.errors import SupabaseError
from wrapcommand.core.logger import get_logger

logger = get_logger("supabase_service")


def _eq_filters(match: Dict[str, Any]) -> Dict[str, str]:
    params = {}
    for column, value in match.items():
        if isinstance(value, bool):
            value = str(value).lower()
        params[column] = f"eq.{value}"
    return params


class SupabaseClient:
    """Thin PostgREST client for the hosted database (service-role access)."""

    def __init__(self, url: str, service_key: str, timeout: float = 15.0):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        full_url = f"{self.base_url}/{table}"
        logger.info(f"Supabase {method} {table} params={params}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(method, full_url, headers=headers, params=params, json=json)
        except httpx.RequestError as e:
            raise SupabaseError(503, f"Database request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error(f"Supabase error {resp.status_code} on {table}: {resp.text}")
            try:
                body = resp.json()
            except ValueError:
                body = {}
            raise SupabaseError(resp.status_code, body.get("message") or resp.text, body.get("code"))

        if not resp.content:
            return None
        return resp.json()

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self.request("POST", table, json=row, prefer="return=representation")
        return rows[0] if rows else {}

    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> int:
        await self.request("POST", table, json=rows, prefer="return=minimal")
        return len(rows)

    async def update(self, table: str, match: Dict[str, Any], values: Dict[str, Any]) -> List[Dict[str, Any]]:
        return await self.request(
            "PATCH", table, params=_eq_filters(match), json=values, prefer="return=representation"
        ) or []

    async def select_one(self, table: str, match: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        params = _eq_filters(match)
        params.update({"select": "*", "limit": "1"})
        rows = await self.request("GET", table, params=params)
        return rows[0] if rows else None

    async def delete_all(self, table: str) -> None:
        # PostgREST refuses unfiltered deletes; match every real id instead
        await self.request("DELETE", table, params={"id": "not.is.null"}, prefer="return=minimal")


def get_supabase_client() -> SupabaseClient:
    return SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
