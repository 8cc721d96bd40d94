"""Farm submission and dashboard endpoints."""

from fastapi import APIRouter, Depends, Query

from carboniq.api.dependencies import (
    get_current_user,
    get_farm_store,
    get_verification_engine,
)
from carboniq.api.models import (
    DashboardResponse,
    FarmDraft,
    FarmRecord,
    StepValidationResponse,
    SubmissionResponse,
)
from carboniq.config.constants import SubmissionStep
from carboniq.infrastructure.auth import UserIdentity
from carboniq.infrastructure.database import FarmStore
from carboniq.services.farms import FarmService, validate_step
from carboniq.services.verification import VerificationEngine

router = APIRouter()


def get_farm_service(
    store: FarmStore = Depends(get_farm_store),  # noqa: B008
    engine: VerificationEngine = Depends(get_verification_engine),  # noqa: B008
) -> FarmService:
    return FarmService(store, engine)


@router.post("/validate", response_model=StepValidationResponse)
async def validate_farm_step(
    draft: FarmDraft,
    step: int = Query(..., ge=1, le=3, description="Form step: 1 basic info, 2 location, 3 practices"),
    user: UserIdentity = Depends(get_current_user),  # noqa: B008
) -> StepValidationResponse:
    """Check whether a draft may advance past one form step."""
    errors = validate_step(SubmissionStep(step), draft)
    return StepValidationResponse(step=step, valid=not errors, errors=errors)


@router.post("", response_model=SubmissionResponse, status_code=201)
async def submit_farm(
    draft: FarmDraft,
    user: UserIdentity = Depends(get_current_user),  # noqa: B008
    svc: FarmService = Depends(get_farm_service),  # noqa: B008
) -> SubmissionResponse:
    """
    Submit a farm for carbon credit verification.

    The farm is stored as pending, verified, and the outcome written back to
    the same record. If the write-back fails the farm stays pending and can be
    verified later through ``POST /farms/{farm_id}/verify``.
    """
    return await svc.submit_farm(user, draft)


@router.get("", response_model=DashboardResponse)
async def list_farms(
    user: UserIdentity = Depends(get_current_user),  # noqa: B008
    svc: FarmService = Depends(get_farm_service),  # noqa: B008
) -> DashboardResponse:
    """The caller's farms, newest first, with credit and status totals."""
    return await svc.dashboard(user)


@router.get("/{farm_id}", response_model=FarmRecord)
async def get_farm(
    farm_id: str,
    user: UserIdentity = Depends(get_current_user),  # noqa: B008
    svc: FarmService = Depends(get_farm_service),  # noqa: B008
) -> FarmRecord:
    """One farm owned by the caller."""
    return await svc.get_farm(user, farm_id)


@router.post("/{farm_id}/verify", response_model=SubmissionResponse)
async def verify_farm(
    farm_id: str,
    user: UserIdentity = Depends(get_current_user),  # noqa: B008
    svc: FarmService = Depends(get_farm_service),  # noqa: B008
) -> SubmissionResponse:
    """Verify a farm that is still pending."""
    return await svc.verify_farm(user, farm_id)
