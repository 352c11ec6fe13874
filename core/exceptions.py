from typing import Optional


class RepairShopError(Exception):
    """Base exception for persistence operations."""


class ConfigurationError(RepairShopError):
    """No store endpoint is configured."""

    def __init__(self, message: str = "Database not connected."):
        super().__init__(message)
        self.message = message


class StoreError(RepairShopError):
    """Failure reported by the store transport, passed through as-is."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def __repr__(self):
        return f"StoreError(code={self.code!r}, message={self.message!r})"


class SchemaMissingError(StoreError):
    """A required table is absent; the setup script has not been run."""

    def __init__(self, table: str, cause: Optional[StoreError] = None):
        message = (
            f"The '{table}' table is missing. "
            "Please run the SQL setup script in Settings."
        )
        super().__init__(
            message,
            code=cause.code if cause else None,
            details=cause.message if cause else None,
        )
        self.table = table
