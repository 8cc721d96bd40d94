"""Request/Response models for API endpoints."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from carboniq.config.constants import VerificationStatus


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


class CatalogResponse(BaseModel):
    """Selectable crop types and farming practices."""

    crop_types: list[str]
    farming_practices: list[str]


class FarmDraft(BaseModel):
    """Farm submission as filled in across the form steps.

    Every field is optional so that partially filled drafts can be checked
    step by step; completeness is enforced by the submission validator.
    """

    name: Optional[str] = Field(None, description="Farm name")
    land_size: Optional[float] = Field(None, description="Land size in hectares")
    crop_types: list[str] = Field(default_factory=list)
    coordinates: Optional[tuple[float, float]] = Field(
        None, description="Map point as [latitude, longitude]"
    )
    boundary_data: Optional[list[tuple[float, float]]] = Field(
        None, description="Optional polygon of [latitude, longitude] points"
    )
    farming_practices: list[str] = Field(default_factory=list)
    planting_date: Optional[date] = None

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(
        cls, v: Optional[tuple[float, float]]
    ) -> Optional[tuple[float, float]]:
        if v is not None:
            latitude, longitude = v
            if not -90 <= latitude <= 90:
                raise ValueError(f"latitude must be within [-90, 90], got {latitude}")
            if not -180 <= longitude <= 180:
                raise ValueError(f"longitude must be within [-180, 180], got {longitude}")
        return v

    @field_validator("boundary_data")
    @classmethod
    def validate_boundary(
        cls, v: Optional[list[tuple[float, float]]]
    ) -> Optional[list[tuple[float, float]]]:
        if v is not None and len(v) < 3:
            raise ValueError("a boundary polygon needs at least 3 points")
        return v


class StepValidationResponse(BaseModel):
    """Outcome of checking one submission step."""

    step: int
    valid: bool
    errors: list[str] = []


class FarmRecord(BaseModel):
    """Stored farm record."""

    id: str
    user_id: str
    name: str
    land_size: float
    coordinates: Optional[list[float]] = None
    boundary_data: Optional[list[list[float]]] = None
    crop_types: list[str] = []
    farming_practices: list[str] = []
    planting_date: Optional[date] = None
    verification_status: VerificationStatus = VerificationStatus.PENDING
    carbon_credits: Optional[float] = None
    confidence_score: Optional[float] = None
    rejection_reasons: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "FarmRecord":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=row.get("name") or "",
            land_size=row.get("land_size") or 0,
            coordinates=row.get("coordinates"),
            boundary_data=row.get("boundary_data"),
            crop_types=row.get("crop_types") or [],
            farming_practices=row.get("farming_practices") or [],
            planting_date=row.get("planting_date"),
            verification_status=row.get("verification_status") or VerificationStatus.PENDING,
            carbon_credits=row.get("carbon_credits"),
            confidence_score=row.get("confidence_score"),
            rejection_reasons=row.get("rejection_reasons"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class VerificationOutcome(BaseModel):
    """Verification result as returned to the client."""

    status: VerificationStatus
    carbon_credits: Optional[float] = None
    confidence_score: Optional[float] = None
    rejection_reasons: Optional[list[str]] = None


class SubmissionResponse(BaseModel):
    """Stored farm plus its verification outcome."""

    farm: FarmRecord
    verification: VerificationOutcome
    message: str


class DashboardResponse(BaseModel):
    """Owner's farms with summary figures."""

    farms: list[FarmRecord]
    total_credits: float
    verified_count: int
    pending_count: int
    rejected_count: int


class MarketplaceFarm(BaseModel):
    """Verified farm offered in the marketplace."""

    id: str
    user_id: str
    name: str
    land_size: float
    crop_types: list[str] = []
    farming_practices: list[str] = []
    carbon_credits: float
    confidence_score: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "MarketplaceFarm":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=row.get("name") or "",
            land_size=row.get("land_size") or 0,
            crop_types=row.get("crop_types") or [],
            farming_practices=row.get("farming_practices") or [],
            carbon_credits=row["carbon_credits"],
            confidence_score=row.get("confidence_score") or 0,
            created_at=row.get("created_at"),
        )


class MarketplaceResponse(BaseModel):
    """Filtered marketplace listing."""

    farms: list[MarketplaceFarm]
    total_farms: int
    total_credits: float
    crop_types: list[str]
