"""Asynchronous HTTP client returning uniform result envelopes."""

import asyncio
import os
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx

from avva_net._internal.http import DEFAULT_TIMEOUT, create_http_client
from avva_net._internal.query import append_query, build_url, is_absolute_url
from avva_net._internal.redaction import format_headers
from avva_net._internal.serialization import (
    JSON_CONTENT_TYPE,
    deserialize,
    deserialize_text,
    serialize,
)
from avva_net.exceptions import AvvaNetConfigError, AvvaNetDeserializationError
from avva_net.models import (
    INTERNAL_ERROR_STATUS,
    STATUS_NOT_SENT,
    DataEnvelope,
    Envelope,
    MultipartForm,
)

T = TypeVar("T")

DEFAULT_TIMEOUT_MS = int(DEFAULT_TIMEOUT * 1000)

# Operation labels used as the prefix of local failure messages
OP_GET = "GetAsync"
OP_DOWNLOAD = "DownloadFile"
OP_POST = "PostAsync"
OP_PUT = "PutAsync"
OP_PATCH = "PatchAsync"
OP_DELETE = "DeleteAsync"


class NetworkManager:
    """HTTP client bound to a base address.

    Every operation returns an Envelope and never raises for network failures
    or non-success statuses: inspect ``is_success`` before trusting ``data``.
    Malformed URLs and unserializable request bodies still raise.

    The base address and headers are plain instance state. Each call reads
    them once when it starts; changing them while other calls are in flight
    is not synchronized, so configure the instance before issuing concurrent
    traffic or use one instance per configuration.

    Use `NetworkManager.from_env()` to create a client from environment
    variables.
    """

    def __init__(
        self,
        base_address: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
    ) -> None:
        """Initialize the network manager.

        Args:
            base_address: Absolute http(s) URL prefixed to relative paths.
            http_client: Transport to use. When omitted a pooled client is
                created and closed by `aclose()`; a supplied client is left
                open for its owner.
            timeout_ms: Timeout for the created transport, in milliseconds.
            debug: Enable debug logging to stderr.

        Raises:
            AvvaNetConfigError: If base_address is not an absolute http(s) URL.
        """
        self._base_address: str | None = None
        self._headers: list[tuple[str, str]] = []
        self._debug = debug
        if base_address is not None:
            self.set_base_address(base_address)
        self._owns_client = http_client is None
        self._client = http_client or create_http_client(timeout=timeout_ms / 1000)

    @classmethod
    def from_env(cls) -> "NetworkManager":
        """Create a network manager from environment variables.

        Optional environment variables:
            AVVA_NET_BASE_ADDRESS: Base address for relative paths.
            AVVA_NET_BEARER_TOKEN: Token sent as "Authorization: Bearer ...".
            AVVA_NET_TIMEOUT_MS: Transport timeout in milliseconds.
            AVVA_NET_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A configured NetworkManager.

        Raises:
            ValueError: If AVVA_NET_TIMEOUT_MS is not an integer.
            AvvaNetConfigError: If AVVA_NET_BASE_ADDRESS is malformed.
        """
        base_address = os.environ.get("AVVA_NET_BASE_ADDRESS") or None
        bearer_token = os.environ.get("AVVA_NET_BEARER_TOKEN")

        debug = os.environ.get("AVVA_NET_DEBUG", "") == "1"
        timeout_ms = int(os.environ.get("AVVA_NET_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))

        manager = cls(base_address, timeout_ms=timeout_ms, debug=debug)
        if bearer_token:
            manager.add_bearer_token(bearer_token)
        return manager

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def base_address(self) -> str | None:
        """The base address prefixed to relative paths."""
        return self._base_address

    @property
    def headers(self) -> list[tuple[str, str]]:
        """A copy of the headers sent with every request, in order."""
        return list(self._headers)

    def set_base_address(self, base_address: str) -> None:
        """Replace the base address.

        Raises:
            AvvaNetConfigError: If the value is not an absolute http(s) URL.
        """
        if not is_absolute_url(base_address) or httpx.URL(base_address).scheme not in (
            "http",
            "https",
        ):
            raise AvvaNetConfigError(f"Invalid base address: {base_address!r}")
        self._base_address = base_address

    def clear_headers(self) -> None:
        """Remove all default headers."""
        self._headers.clear()

    def add_header(self, name: str, value: str) -> None:
        """Add a header to every request. Repeated names are all sent."""
        self._headers.append((name, value))

    def add_bearer_token(self, token: str) -> None:
        """Add an "Authorization: Bearer <token>" header."""
        self.add_header("Authorization", f"Bearer {token}")

    def add_json_content_type_header(self) -> None:
        """Add a "ContentType: application/json" header.

        This is a custom header name, not the standard Content-Type; JSON
        request bodies already carry Content-Type on their own.
        """
        self.add_header("ContentType", JSON_CONTENT_TYPE)

    # =========================================================================
    # GET
    # =========================================================================

    async def get(
        self,
        path: str,
        params: Mapping[str, str] | None = None,
        *,
        response_type: type[T] | None = None,
    ) -> DataEnvelope[T]:
        """Send a GET request and decode the JSON response.

        Args:
            path: Path relative to the base address, or an absolute URL.
            params: Query parameters, appended without percent-encoding.
            response_type: Type to decode the body into. Keys are matched to
                fields case-insensitively. Omit to get plain decoded JSON.

        Returns:
            Envelope with ``data`` set on success.
        """
        url = append_query(build_url(self._base_address, path), params)
        return await self._request(
            OP_GET,
            "GET",
            url,
            decode=lambda response: deserialize(response.content, response_type),
        )

    async def get_text(
        self, path: str, params: Mapping[str, str] | None = None
    ) -> DataEnvelope[str]:
        """Send a GET request and return the response body verbatim.

        Suited to XML or other non-JSON payloads.
        """
        url = append_query(build_url(self._base_address, path), params)
        return await self._request(OP_GET, "GET", url, decode=lambda response: response.text)

    async def download(self, url: str, output_path: str | os.PathLike[str]) -> Envelope:
        """Download a resource and write its bytes to ``output_path``.

        The file is written only once the whole body has arrived. Any failure,
        including a non-2xx status or a filesystem error, yields an envelope
        with status 500 and leaves the output file untouched.

        Args:
            url: Absolute URL, or a path relative to the base address.
            output_path: Destination file.

        Returns:
            Envelope without payload.
        """
        target = build_url(self._base_address, url)
        try:
            response = await self._send("GET", target)
            response.raise_for_status()
            await asyncio.to_thread(Path(output_path).write_bytes, response.content)
        except Exception as e:
            self._log_debug(f"Download failed: {e}")
            return Envelope(
                is_success=False,
                status_code=INTERNAL_ERROR_STATUS,
                message=f"{OP_DOWNLOAD} Error: {e}",
                error=e,
            )
        self._log_debug(f"Downloaded {len(response.content)} bytes to {output_path}")
        return Envelope(status_code=response.status_code)

    # =========================================================================
    # POST / PUT / PATCH / DELETE
    # =========================================================================

    async def post(
        self, path: str, body: Any, *, response_type: type[T] | None = None
    ) -> DataEnvelope[T]:
        """Send a JSON POST request and decode the JSON response.

        Args:
            path: Path relative to the base address, or an absolute URL.
            body: Any JSON-serializable value (models, dataclasses, dicts...).
            response_type: Type to decode the body into.

        Returns:
            Envelope with ``data`` set on success.
        """
        return await self._request(
            OP_POST,
            "POST",
            build_url(self._base_address, path),
            decode=lambda response: deserialize(response.content, response_type),
            content=serialize(body),
            content_type=JSON_CONTENT_TYPE,
        )

    async def post_no_content(self, path: str, body: Any) -> Envelope:
        """Send a JSON POST request without reading the success body."""
        return await self._request_no_content(
            OP_POST,
            "POST",
            build_url(self._base_address, path),
            content=serialize(body),
            content_type=JSON_CONTENT_TYPE,
        )

    async def post_form(
        self,
        path: str,
        fields: Mapping[str, str],
        *,
        response_type: type[T] | None = None,
    ) -> DataEnvelope[T]:
        """Send an x-www-form-urlencoded POST and decode the JSON response."""
        return await self._request(
            OP_POST,
            "POST",
            build_url(self._base_address, path),
            decode=lambda response: deserialize(response.content, response_type),
            data=dict(fields),
        )

    async def post_multipart(
        self,
        path: str,
        form: MultipartForm,
        *,
        response_type: type[T] | None = None,
    ) -> DataEnvelope[T]:
        """Send a multipart/form-data POST and decode the JSON response."""
        return await self._request(
            OP_POST,
            "POST",
            build_url(self._base_address, path),
            decode=lambda response: deserialize(response.content, response_type),
            data=form.data,
            files=form.files,
        )

    async def put(
        self, path: str, body: Any, *, response_type: type[T] | None = None
    ) -> DataEnvelope[T]:
        """Send a JSON PUT request and decode the JSON response."""
        return await self._request(
            OP_PUT,
            "PUT",
            build_url(self._base_address, path),
            decode=lambda response: deserialize(response.content, response_type),
            content=serialize(body),
            content_type=JSON_CONTENT_TYPE,
        )

    async def patch(
        self, path: str, body: Any, *, response_type: type[T] | None = None
    ) -> DataEnvelope[T]:
        """Send a JSON PATCH request and decode the JSON response."""
        return await self._request(
            OP_PATCH,
            "PATCH",
            build_url(self._base_address, path),
            decode=lambda response: deserialize(response.content, response_type),
            content=serialize(body),
            content_type=JSON_CONTENT_TYPE,
        )

    async def patch_no_content(self, path: str, body: Any) -> Envelope:
        """Send a JSON PATCH request without reading the success body."""
        return await self._request_no_content(
            OP_PATCH,
            "PATCH",
            build_url(self._base_address, path),
            content=serialize(body),
            content_type=JSON_CONTENT_TYPE,
        )

    async def delete(self, path: str, *, response_type: type[T] | None = None) -> DataEnvelope[T]:
        """Send a DELETE request and decode the JSON response text."""
        return await self._request(
            OP_DELETE,
            "DELETE",
            build_url(self._base_address, path),
            decode=lambda response: deserialize_text(response.text, response_type),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[avva-net] {message}", file=sys.stderr)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        stream: bool = False,
        content_type: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request with the current default headers."""
        headers = list(self._headers)
        if content_type is not None:
            headers.append(("Content-Type", content_type))

        request = self._client.build_request(method, url, headers=headers, **kwargs)
        self._log_debug(f"{method} {request.url} [{format_headers(request.headers.multi_items())}]")
        response = await self._client.send(request, stream=stream)
        self._log_debug(f"{method} {request.url} -> {response.status_code}")
        return response

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        decode: Callable[[httpx.Response], Any],
        **kwargs: Any,
    ) -> DataEnvelope[Any]:
        """Send a request and decode its success body with ``decode``."""
        try:
            response = await self._send(method, url, **kwargs)
        except httpx.RequestError as e:
            return self._local_failure(DataEnvelope, operation, e)

        if not response.is_success:
            return DataEnvelope(
                is_success=False,
                status_code=response.status_code,
                message=response.text,
            )

        try:
            data = decode(response)
        except ValueError as e:
            error = AvvaNetDeserializationError(
                f"Could not decode response body: {e}", status_code=response.status_code
            )
            error.__cause__ = e
            return self._local_failure(
                DataEnvelope, operation, error, status_code=response.status_code
            )
        return DataEnvelope(status_code=response.status_code, data=data)

    async def _request_no_content(
        self, operation: str, method: str, url: str, **kwargs: Any
    ) -> Envelope:
        """Send a request, reading the body only when the status is not 2xx."""
        try:
            response = await self._send(method, url, stream=True, **kwargs)
            try:
                if response.is_success:
                    return Envelope(status_code=response.status_code)
                await response.aread()
                return Envelope(
                    is_success=False,
                    status_code=response.status_code,
                    message=response.text,
                )
            finally:
                await response.aclose()
        except httpx.RequestError as e:
            return self._local_failure(Envelope, operation, e)

    def _local_failure(
        self,
        envelope_type: type[Envelope],
        operation: str,
        error: Exception,
        *,
        status_code: int = STATUS_NOT_SENT,
    ) -> Any:
        """Build the envelope for a failure raised on this side of the wire."""
        self._log_debug(f"{operation} failed: {error}")
        return envelope_type(
            is_success=False,
            status_code=status_code,
            message=f"{operation} Error: {error}",
            error=error,
        )


def get_network_manager() -> NetworkManager:
    """Get a network manager configured from environment variables.

    Returns:
        A configured NetworkManager instance.
    """
    return NetworkManager.from_env()
