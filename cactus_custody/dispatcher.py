"""
Authenticated Request Dispatcher
================================
Signs each logical call and hands it to the resilient transport.
"""

from typing import Optional, Any, Mapping
from urllib.parse import urlencode
import structlog

from .exceptions import SigningError
from .http import ResilientTransport, TransportResponse
from .signing import SigningContext, create_signed_headers

logger = structlog.get_logger(__name__)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_uri(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Append query parameters to a path.

    None values are skipped; list/tuple values become repeated parameters.
    """
    if not params:
        return path

    pairs = []
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((name, _query_value(v)) for v in value)
        else:
            pairs.append((name, _query_value(value)))

    if not pairs:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{urlencode(pairs)}"


class RequestDispatcher:
    """
    Orchestrates one authenticated call: nonce and date, canonical string,
    signature, headers, then the transport.

    Nonce and date are generated once per logical call. Every retry of that
    call resends the same signed headers.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        signing_context: SigningContext,
        transport: Optional[ResilientTransport] = None,
    ):
        if signing_context is None:
            raise SigningError("RequestDispatcher requires a loaded signing key")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._signing_context = signing_context
        self.transport = transport or ResilientTransport()

    async def aclose(self):
        await self.transport.aclose()

    async def send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[bytes] = None,
    ) -> TransportResponse:
        """Sign and send a request, returning the final transport response."""
        uri = build_uri(path, params)
        signed = create_signed_headers(
            self._signing_context,
            self.api_key,
            method,
            uri,
            body,
        )
        logger.debug(
            "Dispatching signed request",
            method=signed.canonical.method,
            uri=uri,
            nonce=signed.canonical.nonce[:8],
        )
        return await self.transport.request(
            signed.canonical.method,
            self.base_url + uri,
            headers=signed.headers,
            content=body,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[bytes] = None,
    ) -> bytes:
        """Sign and send a request, returning the raw response body."""
        response = await self.send(method, path, params, body)
        return response.content

