"""Farm record stores.

Two backends share one interface: a Supabase (PostgREST) table reached over
httpx, and an in-process dictionary used for local runs and tests. Writes of
verification results are conditional on the record still being pending, so
applying the same result twice leaves the record unchanged.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import httpx

from carboniq.config.constants import VerificationStatus
from carboniq.config.settings import Settings
from carboniq.infrastructure.database.errors import RecordStoreError

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FarmStore(ABC):
    """Persistence operations consumed by the farm and marketplace services."""

    @abstractmethod
    async def create_farm(self, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a record and return it with its id and timestamps."""

    @abstractmethod
    async def get_farm(self, farm_id: str) -> dict[str, Any] | None:
        """Fetch one record, or None if it does not exist."""

    @abstractmethod
    async def apply_verification(self, farm_id: str, update: dict[str, Any]) -> dict[str, Any]:
        """
        Write a verification result onto a pending record.

        Returns:
            Dictionary with success status and affected row count:
            {
                "success": bool,
                "rows_affected": int,
                "error": str | None
            }
        """

    @abstractmethod
    async def list_farms(
        self,
        user_id: str | None = None,
        status: VerificationStatus | None = None,
        require_credits: bool = False,
    ) -> list[dict[str, Any]]:
        """List records newest first, optionally filtered by owner and status."""

    async def close(self) -> None:
        """Release any held resources."""


class InMemoryFarmStore(FarmStore):
    """Dictionary-backed store."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._sequence: dict[str, int] = {}

    async def create_farm(self, record: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        stored = {
            "verification_status": VerificationStatus.PENDING.value,
            "carbon_credits": None,
            "confidence_score": None,
            "rejection_reasons": None,
            **record,
            "id": str(uuid.uuid4()),
            "created_at": now,
            "updated_at": now,
        }
        self._records[stored["id"]] = stored
        self._sequence[stored["id"]] = len(self._sequence)
        return dict(stored)

    async def get_farm(self, farm_id: str) -> dict[str, Any] | None:
        record = self._records.get(farm_id)
        return dict(record) if record is not None else None

    async def apply_verification(self, farm_id: str, update: dict[str, Any]) -> dict[str, Any]:
        record = self._records.get(farm_id)
        if record is None or record["verification_status"] != VerificationStatus.PENDING.value:
            return {"success": True, "rows_affected": 0, "error": None}
        record.update(update)
        record["updated_at"] = _now()
        return {"success": True, "rows_affected": 1, "error": None}

    async def list_farms(
        self,
        user_id: str | None = None,
        status: VerificationStatus | None = None,
        require_credits: bool = False,
    ) -> list[dict[str, Any]]:
        rows = [
            dict(r)
            for r in self._records.values()
            if (user_id is None or r["user_id"] == user_id)
            and (status is None or r["verification_status"] == status.value)
            and (not require_credits or r["carbon_credits"] is not None)
        ]
        rows.sort(key=lambda r: (r["created_at"], self._sequence[r["id"]]), reverse=True)
        return rows


class SupabaseFarmStore(FarmStore):
    """Farm table exposed through Supabase's PostgREST endpoint."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """Initialize the REST client.

        Args:
            settings: Application settings containing the Supabase project URL and keys
            client: Optional pre-built client (tests pass one with a mock transport)
        """
        self.settings = settings
        self.table = settings.farms_table
        key = settings.supabase_service_key or settings.supabase_anon_key
        self._client = client or httpx.AsyncClient(
            base_url=f"{settings.supabase_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": settings.supabase_anon_key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=settings.store_timeout,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, f"/{self.table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Supabase %s failed with %s: %s", operation, e.response.status_code, e.response.text)
            raise RecordStoreError(operation, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Supabase %s transport error: %s", operation, e)
            raise RecordStoreError(operation, str(e)) from e
        return response

    async def create_farm(self, record: dict[str, Any]) -> dict[str, Any]:
        payload = {"verification_status": VerificationStatus.PENDING.value, **record}
        response = await self._request(
            "create farm record",
            "POST",
            json=[payload],
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise RecordStoreError("create farm record", "no row returned")
        return rows[0]

    async def get_farm(self, farm_id: str) -> dict[str, Any] | None:
        response = await self._request(
            "fetch farm record", "GET", params={"select": "*", "id": f"eq.{farm_id}"}
        )
        rows = response.json()
        return rows[0] if rows else None

    async def apply_verification(self, farm_id: str, update: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._request(
                "record verification result",
                "PATCH",
                params={
                    "id": f"eq.{farm_id}",
                    "verification_status": f"eq.{VerificationStatus.PENDING.value}",
                },
                json={**update, "updated_at": _now()},
                headers={"Prefer": "return=representation"},
            )
        except RecordStoreError as e:
            return {"success": False, "rows_affected": 0, "error": str(e)}
        return {"success": True, "rows_affected": len(response.json()), "error": None}

    async def list_farms(
        self,
        user_id: str | None = None,
        status: VerificationStatus | None = None,
        require_credits: bool = False,
    ) -> list[dict[str, Any]]:
        params = {"select": "*", "order": "created_at.desc"}
        if user_id is not None:
            params["user_id"] = f"eq.{user_id}"
        if status is not None:
            params["verification_status"] = f"eq.{status.value}"
        if require_credits:
            params["carbon_credits"] = "not.is.null"
        response = await self._request("list farm records", "GET", params=params)
        return list(response.json())

    async def close(self) -> None:
        await self._client.aclose()


def create_farm_store(settings: Settings) -> FarmStore:
    """Build the store selected by ``store_backend``."""
    if settings.store_backend == "supabase":
        logger.info("Using Supabase farm store at %s", settings.supabase_url)
        return SupabaseFarmStore(settings)
    logger.info("Using in-memory farm store")
    return InMemoryFarmStore()
