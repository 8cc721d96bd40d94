"""Shared record store helpers."""

import logging
from typing import Any

from carboniq.infrastructure.database.errors import RecordStoreError

logger = logging.getLogger(__name__)


def check_db_result(result: dict[str, Any], operation: str) -> None:
    """Raise RecordStoreError if a store write failed."""
    if not result.get("success") or result.get("error"):
        logger.error("Failed to %s: %s", operation, result.get("error"))
        raise RecordStoreError(operation, result.get("error") or "")


def audit_log(operation: str, resource: str, resource_id: str) -> None:
    """Log CRUD operations for audit trail."""
    logger.info("AUDIT %s %s id=%s", operation, resource, resource_id)
