"""Internal modules for avva-net.

WARNING: These modules back NetworkManager and are not part of the public API.

Modules:
    http - Shared transport configuration
    query - Query-string encoding and URL construction
    serialization - JSON encoding/decoding of bodies
    redaction - Header redaction for debug output
"""
