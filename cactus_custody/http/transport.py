"""
Resilient Transport
===================
Async HTTP transport with bounded retries, exponential backoff and
cancellation, shared by every signed custody request.
"""

import asyncio
import json
import time
from typing import Optional, Dict, Any
from dataclasses import dataclass

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
)

from ..exceptions import (
    InvalidRequestError,
    TransientTransportError,
    RetryExhaustedError,
    RequestCancelledError,
)
from .backoff import BudgetedExponentialWait, log_before_sleep
from .config import TransportConfig

logger = structlog.get_logger(__name__)

# Bytes of a 5xx body kept on the raised error
ERROR_BODY_PREVIEW = 512


@dataclass
class TransportResponse:
    """The final response of a logical call."""
    status_code: int
    headers: httpx.Headers
    content: bytes
    attempts: int = 1

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


async def _release(response: httpx.Response) -> None:
    """Close a response, never letting cleanup mask the primary error."""
    try:
        await response.aclose()
    except httpx.HTTPError as e:
        logger.debug("Failed to release response", error=str(e))


class ResilientTransport:
    """
    Executes HTTP requests with retries on transport errors and 5xx responses.

    Features:
    - Connection pooling (one httpx.AsyncClient shared by concurrent calls).
    - Retries on connection failures, timeouts and status >= 500.
    - 4xx and other responses are returned as-is, never retried.
    - Attempts bounded by max_retries + 1 and by max_elapsed_time.
    - Task cancellation, including during backoff, stops immediately.

    Example:
        async with ResilientTransport(TransportConfig(max_retries=3)) as transport:
            response = await transport.request("GET", "https://api.example/ping")
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.timeout,
            verify=not self.config.insecure_skip_verify,
            trust_env=True,  # honours HTTP(S)_PROXY
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Request:
        """Build a request with the configured default headers applied first."""
        merged = {**self.config.default_headers, **(headers or {})}
        try:
            return self._client.build_request(method, url, headers=merged, content=content)
        except httpx.InvalidURL as e:
            raise InvalidRequestError(f"Invalid request URL {url!r}: {e}")

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> TransportResponse:
        return await self.send(self.build_request(method, url, headers, content))

    async def send(self, request: httpx.Request) -> TransportResponse:
        """
        Send a request, retrying transient failures.

        The same request, headers included, is resent on every attempt.

        Raises:
            InvalidRequestError: If the URL cannot be sent at all
            RetryExhaustedError: If every allowed attempt failed transiently
            RequestCancelledError: If the calling task was cancelled
        """
        started = time.monotonic()
        attempts = 0

        async def attempt() -> TransportResponse:
            nonlocal attempts
            attempts += 1
            return await self._attempt(request, started, attempts)

        wait = BudgetedExponentialWait(self.config)
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(TransientTransportError),
            stop=(
                stop_after_attempt(self.config.max_attempts)
                | stop_after_delay(self.config.max_elapsed_time)
                | wait.budget_spent
            ),
            wait=wait,
            before_sleep=log_before_sleep,
            reraise=False,
        )

        try:
            return await retrying(attempt)
        except RetryError as e:
            last = e.last_attempt.exception()
            logger.error(
                "Retry exhausted",
                method=request.method,
                url=str(request.url),
                attempts=attempts,
                error=str(last),
            )
            raise RetryExhaustedError(
                f"{request.method} {request.url} failed after {attempts} attempts: {last}",
                last_exception=last,
                attempts=attempts,
            ) from last
        except RequestCancelledError:
            raise
        except asyncio.CancelledError as e:
            logger.info(
                "Request cancelled",
                method=request.method,
                url=str(request.url),
                attempts=attempts,
            )
            raise RequestCancelledError(
                f"{request.method} {request.url} cancelled after {attempts} attempts"
            ) from e

    async def _attempt(
        self,
        request: httpx.Request,
        started: float,
        attempt_number: int,
    ) -> TransportResponse:
        """One physical exchange. Raises TransientTransportError when retryable."""
        remaining = self.config.max_elapsed_time - (time.monotonic() - started)
        timeout = min(self.config.timeout, remaining) if remaining > 0 else self.config.timeout
        request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()

        try:
            response = await self._client.send(request, stream=True)
        except httpx.UnsupportedProtocol as e:
            raise InvalidRequestError(f"Unsupported URL {request.url}: {e}")
        except httpx.TimeoutException as e:
            raise TransientTransportError(f"Request timed out: {type(e).__name__}") from e
        except httpx.TransportError as e:
            raise TransientTransportError(f"Failed to connect: {type(e).__name__}: {e}") from e

        try:
            content = await response.aread()
        except httpx.TransportError as e:
            raise TransientTransportError(
                f"Failed to read response: {type(e).__name__}: {e}",
                status_code=response.status_code,
            ) from e
        finally:
            await _release(response)

        if response.status_code >= 500:
            raise TransientTransportError(
                "Server error",
                status_code=response.status_code,
                details=content[:ERROR_BODY_PREVIEW].decode("utf-8", errors="replace"),
            )

        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            content=content,
            attempts=attempt_number,
        )
