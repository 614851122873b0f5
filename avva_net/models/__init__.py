"""Public models for avva-net."""

from avva_net.models.envelope import (
    INTERNAL_ERROR_STATUS,
    STATUS_NOT_SENT,
    DataEnvelope,
    Envelope,
    MultipartForm,
)

__all__ = [
    "Envelope",
    "DataEnvelope",
    "MultipartForm",
    "STATUS_NOT_SENT",
    "INTERNAL_ERROR_STATUS",
]
