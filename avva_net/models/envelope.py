"""Pydantic models for request results.

Every NetworkManager operation returns one of these envelopes instead of
raising on network or HTTP failures.
"""

from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from avva_net.exceptions import AvvaNetAPIError

# =============================================================================
# Constants
# =============================================================================

STATUS_NOT_SENT = 0
INTERNAL_ERROR_STATUS = 500

T = TypeVar("T")

# =============================================================================
# Envelopes
# =============================================================================


class Envelope(BaseModel):
    """Result of a request that carries no typed payload.

    Fields:
        is_success: True for a 2xx status with no local error
        status_code: Transport status; 0 when the request never completed,
            500 when a download failed
        message: Raw response body on non-success, or a
            "<Operation> Error: ..." description on local failure
        error: The captured local failure, if any
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    is_success: bool = True
    status_code: int = STATUS_NOT_SENT
    message: str | None = None
    error: BaseException | None = Field(default=None, repr=False)

    @property
    def failed(self) -> bool:
        """Check if the request did not succeed."""
        return not self.is_success

    def ensure_success(self) -> Self:
        """Return self on success, raise otherwise.

        Local failures re-raise the captured error. Remote non-success raises
        AvvaNetAPIError carrying the status code and response body.

        Raises:
            AvvaNetAPIError: The server answered with a non-2xx status.
        """
        if self.is_success:
            return self
        if self.error is not None:
            raise self.error
        raise AvvaNetAPIError(self.message or "", status_code=self.status_code)


class DataEnvelope(Envelope, Generic[T]):
    """Result of a request whose success body is decoded into ``data``."""

    data: T | None = None


# =============================================================================
# Request Bodies
# =============================================================================


class MultipartForm(BaseModel):
    """Pre-built multipart/form-data body.

    Passed to the transport as-is; parts are encoded by httpx.

    Fields:
        data: Plain form fields
        files: File parts, in any form httpx accepts for ``files=``
            (bytes, file object, or (filename, content[, content_type]) tuple)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: dict[str, str] = Field(default_factory=dict)
    files: dict[str, Any] = Field(default_factory=dict)
