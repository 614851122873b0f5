"""Redaction of sensitive header values for debug output."""

from collections.abc import Iterable

REDACT_HEADERS: frozenset[str] = frozenset({
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "api-key",
    "x-auth-token",
})

REDACTED_VALUE = "[REDACTED]"


def redact_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Replace the values of sensitive headers with "[REDACTED]".

    Header names are compared case-insensitively. Order and duplicates are
    preserved; the input is never mutated.

    Args:
        headers: Name/value pairs as sent on the wire.

    Returns:
        A new list of name/value pairs safe to print.
    """
    return [
        (name, REDACTED_VALUE if name.lower() in REDACT_HEADERS else value)
        for name, value in headers
    ]


def format_headers(headers: Iterable[tuple[str, str]]) -> str:
    """Render headers on a single line, redacted."""
    return ", ".join(f"{name}: {value}" for name, value in redact_headers(headers))
