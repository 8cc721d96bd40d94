"""Farm verification."""

from carboniq.services.verification.engine import VerificationEngine, round_credits
from carboniq.services.verification.models import Coordinates, FarmSubmission, VerificationResult

__all__ = [
    "Coordinates",
    "FarmSubmission",
    "VerificationEngine",
    "VerificationResult",
    "round_credits",
]
