"""Farm submissions."""

from carboniq.services.farms.service import FarmService
from carboniq.services.farms.validation import validate_step, validate_submission

__all__ = ["FarmService", "validate_step", "validate_submission"]
