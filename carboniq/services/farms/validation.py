"""Submission step validation."""

import math

from carboniq.api.models import FarmDraft
from carboniq.config.constants import SubmissionStep


def validate_step(step: SubmissionStep, draft: FarmDraft) -> list[str]:
    """Return the missing-field messages that block advancing past ``step``."""
    errors: list[str] = []

    if step == SubmissionStep.BASIC_INFO:
        if not draft.name or not draft.name.strip():
            errors.append("Farm name is required")
        if draft.land_size is None:
            errors.append("Land size is required")
        elif not math.isfinite(draft.land_size):
            errors.append("Land size must be a finite number")
        elif draft.land_size <= 0:
            errors.append("Land size must be greater than zero")
        if not draft.crop_types:
            errors.append("Select at least one crop type")

    elif step == SubmissionStep.LOCATION:
        # The boundary polygon is optional; only the point is required.
        if draft.coordinates is None:
            errors.append("Farm location is required")

    elif step == SubmissionStep.PRACTICES:
        if not draft.farming_practices:
            errors.append("Select at least one farming practice")
        if draft.planting_date is None:
            errors.append("Planting date is required")

    return errors


def validate_submission(draft: FarmDraft) -> list[str]:
    """Validate every step, in form order."""
    errors: list[str] = []
    for step in SubmissionStep:
        errors.extend(validate_step(step, draft))
    return errors
