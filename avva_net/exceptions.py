"""Public exceptions for avva-net."""


class AvvaNetError(Exception):
    """Base exception for all avva-net errors."""


class AvvaNetAPIError(AvvaNetError):
    """Remote endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AvvaNetConfigError(AvvaNetError):
    """Configuration error (invalid base address, bad env vars)."""


class AvvaNetDeserializationError(AvvaNetError):
    """Response body could not be decoded into the requested type."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
