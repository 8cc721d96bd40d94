"""Farm submission and dashboard service."""

import logging
from typing import Any

from fastapi import HTTPException

from carboniq.api.models import (
    DashboardResponse,
    FarmDraft,
    FarmRecord,
    SubmissionResponse,
    VerificationOutcome,
)
from carboniq.config.constants import VerificationStatus
from carboniq.infrastructure.auth import UserIdentity
from carboniq.infrastructure.database import (
    FarmStore,
    RecordStoreError,
    audit_log,
    check_db_result,
)
from carboniq.infrastructure.logging.logger import StructuredLogger
from carboniq.services.farms.validation import validate_submission
from carboniq.services.verification import (
    Coordinates,
    FarmSubmission,
    VerificationEngine,
    VerificationResult,
    round_credits,
)

logger = logging.getLogger(__name__)


def submission_from_record(row: dict[str, Any]) -> FarmSubmission:
    """Build the engine input from a stored farm record."""
    return FarmSubmission(
        land_size=float(row["land_size"]),
        crop_types=tuple(row.get("crop_types") or ()),
        farming_practices=tuple(row.get("farming_practices") or ()),
        coordinates=Coordinates.from_pair(row.get("coordinates")),
    )


def outcome_message(outcome: VerificationOutcome) -> str:
    """User-facing notification text for a verification outcome."""
    if outcome.status == VerificationStatus.VERIFIED:
        return "Farm verified successfully!"
    if outcome.status == VerificationStatus.REJECTED:
        return f"Verification failed: {', '.join(outcome.rejection_reasons or [])}"
    return "Verification is still pending"


def _outcome_from_result(result: VerificationResult) -> VerificationOutcome:
    return VerificationOutcome(**result.to_dict())


def _outcome_from_record(row: dict[str, Any]) -> VerificationOutcome:
    return VerificationOutcome(
        status=row["verification_status"],
        carbon_credits=row.get("carbon_credits"),
        confidence_score=row.get("confidence_score"),
        rejection_reasons=row.get("rejection_reasons"),
    )


class FarmService:
    """Handles farm submission, verification write-back and owner listings."""

    def __init__(self, store: FarmStore, engine: VerificationEngine) -> None:
        self.store = store
        self.engine = engine
        self.events = StructuredLogger(__name__)

    async def submit_farm(self, user: UserIdentity, draft: FarmDraft) -> SubmissionResponse:
        """Store a new farm as pending, verify it and record the outcome."""
        errors = validate_submission(draft)
        if errors:
            raise HTTPException(status_code=422, detail=errors)

        record = {
            "user_id": user.id,
            "name": draft.name.strip(),
            "land_size": draft.land_size,
            "coordinates": list(draft.coordinates),
            "boundary_data": [list(p) for p in draft.boundary_data] if draft.boundary_data else None,
            "crop_types": list(dict.fromkeys(draft.crop_types)),
            "farming_practices": list(dict.fromkeys(draft.farming_practices)),
            "planting_date": draft.planting_date.isoformat(),
            "verification_status": VerificationStatus.PENDING.value,
        }
        try:
            created = await self.store.create_farm(record)
        except RecordStoreError as e:
            logger.error("Error creating farm record: %s", e, exc_info=True)
            raise HTTPException(status_code=502, detail="Failed to create farm record") from e
        audit_log("CREATE", "farm", created["id"])

        result = await self.engine.evaluate_async(submission_from_record(created))
        await self._record_result(created["id"], result)

        outcome = _outcome_from_result(result)
        return SubmissionResponse(
            farm=FarmRecord.from_db_row({**created, **result.to_record_update()}),
            verification=outcome,
            message=outcome_message(outcome),
        )

    async def verify_farm(self, user: UserIdentity, farm_id: str) -> SubmissionResponse:
        """Verify a farm left pending; decided farms return their stored outcome."""
        row = await self._get_owned(user, farm_id)

        if row["verification_status"] == VerificationStatus.PENDING.value:
            result = await self.engine.evaluate_async(submission_from_record(row))
            applied = await self._record_result(farm_id, result)
            if applied:
                row = {**row, **result.to_record_update()}
            else:
                # Another request decided it first.
                row = await self._get_owned(user, farm_id)
        else:
            logger.info("Farm %s already %s, returning stored outcome", farm_id, row["verification_status"])

        outcome = _outcome_from_record(row)
        return SubmissionResponse(
            farm=FarmRecord.from_db_row(row),
            verification=outcome,
            message=outcome_message(outcome),
        )

    async def get_farm(self, user: UserIdentity, farm_id: str) -> FarmRecord:
        """Fetch one farm owned by the caller."""
        return FarmRecord.from_db_row(await self._get_owned(user, farm_id))

    async def dashboard(self, user: UserIdentity) -> DashboardResponse:
        """List the caller's farms, newest first, with summary figures."""
        try:
            rows = await self.store.list_farms(user_id=user.id)
        except RecordStoreError as e:
            logger.error("Error fetching farms: %s", e, exc_info=True)
            raise HTTPException(status_code=502, detail="Error fetching farms") from e

        farms = [FarmRecord.from_db_row(r) for r in rows]
        statuses = [f.verification_status for f in farms]
        return DashboardResponse(
            farms=farms,
            total_credits=round_credits(sum(f.carbon_credits or 0 for f in farms)),
            verified_count=statuses.count(VerificationStatus.VERIFIED),
            pending_count=statuses.count(VerificationStatus.PENDING),
            rejected_count=statuses.count(VerificationStatus.REJECTED),
        )

    async def _record_result(self, farm_id: str, result: VerificationResult) -> bool:
        """Write the result onto the pending record. Returns False if it was already decided."""
        try:
            db_result = await self.store.apply_verification(farm_id, result.to_record_update())
            check_db_result(db_result, "record verification result")
        except RecordStoreError as e:
            self.events.log_error("record_verification", e, {"farm_id": farm_id})
            raise HTTPException(
                status_code=502,
                detail={
                    "message": "Farm saved but verification could not be recorded",
                    "farm_id": farm_id,
                },
            ) from e

        if db_result.get("rows_affected", 0) == 0:
            logger.warning("Farm %s was no longer pending, result not applied", farm_id)
            return False
        audit_log("VERIFY", "farm", farm_id)
        return True

    async def _get_owned(self, user: UserIdentity, farm_id: str) -> dict[str, Any]:
        try:
            row = await self.store.get_farm(farm_id)
        except RecordStoreError as e:
            logger.error("Error fetching farm %s: %s", farm_id, e, exc_info=True)
            raise HTTPException(status_code=502, detail="Error fetching farm") from e
        # Other owners' farms are reported as missing.
        if row is None or row.get("user_id") != user.id:
            raise HTTPException(status_code=404, detail=f"Farm '{farm_id}' not found")
        return row
