"""Farm verification engine."""

import asyncio
import logging
import math
import random

from carboniq.config.constants import (
    CONFIDENCE_FLOOR,
    CONFIDENCE_SPAN,
    CREDITS_PER_HECTARE,
    IMAGERY_REJECTION_RATE,
    LOW_CARBON_CROPS,
    MIN_FARMING_PRACTICES,
    MIN_LAND_SIZE_HECTARES,
    PRACTICE_BONUS,
    REASON_COORDINATES,
    REASON_IMAGERY,
    REASON_LAND_SIZE,
    REASON_LAND_SIZE_INVALID,
    REASON_LOW_CARBON_CROP,
    REASON_PRACTICES,
)
from carboniq.infrastructure.logging.logger import StructuredLogger
from carboniq.services.verification.models import FarmSubmission, VerificationResult

logger = logging.getLogger(__name__)


def round_credits(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    scaled = value * 10
    # Floats this large carry no fractional digits.
    if not math.isfinite(scaled) or abs(scaled) >= 2**52:
        return value
    return math.floor(scaled + 0.5) / 10


class VerificationEngine:
    """Scores farm submissions into a verified/rejected outcome.

    Randomness is part of the contract: a fraction of otherwise valid
    submissions is rejected by the simulated imagery check and the
    confidence score is drawn, not derived. Pass a seeded ``random.Random``
    to pin outcomes.
    """

    def __init__(self, rng: random.Random | None = None, delay_seconds: float = 0.0):
        """Initialize verification engine."""
        self.rng = rng if rng is not None else random.Random()
        self.delay_seconds = delay_seconds
        self.events = StructuredLogger(__name__)

    def credits_for(self, submission: FarmSubmission) -> float:
        """Unrounded credits: half a credit per hectare, plus 10% per practice."""
        base_credits = submission.land_size * CREDITS_PER_HECTARE
        practice_multiplier = 1 + len(submission.farming_practices) * PRACTICE_BONUS
        return base_credits * practice_multiplier

    def rejection_reasons(self, submission: FarmSubmission) -> list[str]:
        """Run every check and collect the reasons, in check order."""
        reasons: list[str] = []

        if not math.isfinite(self.credits_for(submission)):
            reasons.append(REASON_LAND_SIZE_INVALID)
        elif submission.land_size < MIN_LAND_SIZE_HECTARES:
            reasons.append(REASON_LAND_SIZE)

        if len(submission.farming_practices) < MIN_FARMING_PRACTICES:
            reasons.append(REASON_PRACTICES)

        # Only a single-crop planting is penalised; mixed plantings pass.
        if len(submission.crop_types) == 1 and submission.crop_types[0] in LOW_CARBON_CROPS:
            reasons.append(REASON_LOW_CARBON_CROP)

        if submission.coordinates is None or submission.coordinates.has_zero_component:
            reasons.append(REASON_COORDINATES)

        if self.rng.random() < IMAGERY_REJECTION_RATE:
            reasons.append(REASON_IMAGERY)

        return reasons

    def evaluate(self, submission: FarmSubmission) -> VerificationResult:
        """Evaluate a submission and return its verification result."""
        reasons = self.rejection_reasons(submission)
        if reasons:
            result = VerificationResult.rejected(reasons)
        else:
            result = VerificationResult.verified(
                carbon_credits=round_credits(self.credits_for(submission)),
                confidence_score=CONFIDENCE_FLOOR + self.rng.random() * CONFIDENCE_SPAN,
            )

        self.events.log_step(
            "verification",
            {
                "land_size": submission.land_size,
                "crop_count": len(submission.crop_types),
                "practice_count": len(submission.farming_practices),
                "result": result.to_dict(),
            },
        )
        return result

    async def evaluate_async(self, submission: FarmSubmission) -> VerificationResult:
        """Evaluate after the simulated verification latency.

        Cancelling the awaiting task abandons the evaluation; nothing is
        drawn or returned in that case.
        """
        if self.delay_seconds > 0:
            logger.debug("Simulating verification latency of %.1fs", self.delay_seconds)
            await asyncio.sleep(self.delay_seconds)
        return self.evaluate(submission)
