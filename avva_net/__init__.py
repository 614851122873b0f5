"""avva-net: asynchronous HTTP client with uniform result envelopes.

Public API:
    NetworkManager - HTTP client bound to a base address
    get_network_manager - NetworkManager configured from environment variables
    Envelope, DataEnvelope - Result models returned by every operation
    MultipartForm - Pre-built multipart/form-data body

Internal (not for direct use):
    _internal - Transport, query, serialization and redaction helpers
"""

from avva_net._version import __version__
from avva_net.client import NetworkManager, get_network_manager
from avva_net.exceptions import (
    AvvaNetAPIError,
    AvvaNetConfigError,
    AvvaNetDeserializationError,
    AvvaNetError,
)
from avva_net.models import (
    INTERNAL_ERROR_STATUS,
    STATUS_NOT_SENT,
    DataEnvelope,
    Envelope,
    MultipartForm,
)

__all__ = [
    "__version__",
    "NetworkManager",
    "get_network_manager",
    "Envelope",
    "DataEnvelope",
    "MultipartForm",
    "STATUS_NOT_SENT",
    "INTERNAL_ERROR_STATUS",
    "AvvaNetError",
    "AvvaNetAPIError",
    "AvvaNetConfigError",
    "AvvaNetDeserializationError",
]
