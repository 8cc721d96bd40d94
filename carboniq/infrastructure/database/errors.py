"""Record store errors."""


class RecordStoreError(Exception):
    """The record store could not complete an operation."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"Failed to {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
