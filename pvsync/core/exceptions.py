"""
PVSync - Exceptions
Every failure the sync loop can surface derives from PVSyncError.
"""


class PVSyncError(Exception):
    """Base exception for all pvsync errors."""


class ConfigError(PVSyncError):
    """Invalid or missing configuration."""


class StorageError(PVSyncError):
    """Sample store query or update failed."""


class ProtocolError(PVSyncError):
    """Request could not be built (bad header or field value)."""


class TransportError(PVSyncError):
    """Connection or IO failure while issuing the request."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class UploadRejectedError(PVSyncError):
    """PVOutput answered a batch with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, system_id: str = "") -> None:
        self.status_code = status_code
        self.system_id = system_id
        super().__init__(message)
