"""Farm record store."""

from carboniq.infrastructure.database.errors import RecordStoreError
from carboniq.infrastructure.database.helpers import audit_log, check_db_result
from carboniq.infrastructure.database.store import (
    FarmStore,
    InMemoryFarmStore,
    SupabaseFarmStore,
    create_farm_store,
)

__all__ = [
    "FarmStore",
    "InMemoryFarmStore",
    "RecordStoreError",
    "SupabaseFarmStore",
    "audit_log",
    "check_db_result",
    "create_farm_store",
]
