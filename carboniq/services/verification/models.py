"""Verification service models."""

from dataclasses import dataclass, field
from typing import Any

from carboniq.config.constants import VerificationStatus


@dataclass(frozen=True)
class Coordinates:
    """A single map point in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_pair(cls, pair: Any) -> "Coordinates | None":
        """Build from a ``[lat, lng]`` pair; ``None`` stays unset."""
        if pair is None:
            return None
        latitude, longitude = pair
        return cls(float(latitude), float(longitude))

    def as_pair(self) -> list[float]:
        return [self.latitude, self.longitude]

    @property
    def has_zero_component(self) -> bool:
        return self.latitude == 0 or self.longitude == 0


@dataclass(frozen=True)
class FarmSubmission:
    """Farm attributes evaluated by the verification engine."""

    land_size: float
    crop_types: tuple[str, ...]
    farming_practices: tuple[str, ...] = ()
    coordinates: Coordinates | None = None

    def __post_init__(self) -> None:
        # Labels behave as sets but keep first-seen order for display.
        object.__setattr__(self, "crop_types", tuple(dict.fromkeys(self.crop_types)))
        object.__setattr__(
            self, "farming_practices", tuple(dict.fromkeys(self.farming_practices))
        )


@dataclass
class VerificationResult:
    """Outcome of a single verification run."""

    status: VerificationStatus
    carbon_credits: float | None = None
    confidence_score: float | None = None
    rejection_reasons: list[str] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.status == VerificationStatus.VERIFIED:
            if self.carbon_credits is None or self.confidence_score is None:
                raise ValueError("verified results need carbon_credits and confidence_score")
            if self.rejection_reasons is not None:
                raise ValueError("verified results cannot carry rejection_reasons")
        elif self.status == VerificationStatus.REJECTED:
            if not self.rejection_reasons:
                raise ValueError("rejected results need at least one rejection reason")
            if self.carbon_credits is not None or self.confidence_score is not None:
                raise ValueError("rejected results cannot carry credits or confidence")
        else:
            raise ValueError(f"a verification result cannot be '{self.status.value}'")

    @property
    def is_verified(self) -> bool:
        return self.status == VerificationStatus.VERIFIED

    @classmethod
    def verified(cls, carbon_credits: float, confidence_score: float) -> "VerificationResult":
        return cls(
            status=VerificationStatus.VERIFIED,
            carbon_credits=carbon_credits,
            confidence_score=confidence_score,
        )

    @classmethod
    def rejected(cls, reasons: list[str]) -> "VerificationResult":
        return cls(status=VerificationStatus.REJECTED, rejection_reasons=list(reasons))

    def to_record_update(self) -> dict[str, Any]:
        """Partial farm record written back to the store."""
        return {
            "verification_status": self.status.value,
            "carbon_credits": self.carbon_credits,
            "confidence_score": self.confidence_score,
            "rejection_reasons": self.rejection_reasons,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "status": self.status.value,
            "carbon_credits": self.carbon_credits,
            "confidence_score": self.confidence_score,
            "rejection_reasons": self.rejection_reasons,
        }
