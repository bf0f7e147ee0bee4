"""
HTTP transport for ShellSage.

The core never talks to the network itself; it hands a RemoteRequest to an
async transport callable and consumes the ResponseEnvelope it returns.
"""

import logging
from typing import Awaitable, Callable, Optional

import httpx

from shellsage.models.generation_models import RemoteRequest, ResponseEnvelope

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"

Transport = Callable[[RemoteRequest], Awaitable[ResponseEnvelope]]


class TransportError(Exception):
    """Raised when the remote call could not be completed."""


class HttpxTransport:
    """
    Async transport backed by httpx.

    Any HTTP status is returned as an envelope. Network-level problems
    (connection errors, timeouts) and requests httpx cannot encode, such as
    non-ASCII header values, raise TransportError.
    """

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the transport.

        Args:
            timeout (float): Request timeout in seconds.
            client (Optional[httpx.AsyncClient]): Client to reuse. When None a
                short-lived client is created per request.
        """
        self.timeout = timeout
        self._client = client

    async def __call__(self, request: RemoteRequest) -> ResponseEnvelope:
        try:
            if self._client is not None:
                response = await self._client.post(
                    request.url,
                    content=request.body,
                    headers=request.headers,
                    timeout=self.timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        request.url, content=request.body, headers=request.headers
                    )
        except httpx.TimeoutException as e:
            logger.warning(f"Request to {request.url} timed out: {e}")
            raise TransportError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error during API request: {e}")
            raise TransportError(f"Network error during API request: {e}") from e
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            # Header values must be ASCII; a pasted key can carry smart quotes.
            logger.warning(f"Could not build request to {request.url}: {e}")
            raise TransportError(f"Could not build API request: {e}") from e

        logger.debug("Remote service answered with status %s", response.status_code)
        return ResponseEnvelope(status=response.status_code, body=response.content)
