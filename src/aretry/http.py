r"""Retried HTTP requests on top of httpx.

This module applies ``retry`` to the most common transient-failure-prone
action: an HTTP request. Retryable status codes and transport errors are
retried; any other error status aborts the session at once. It requires
httpx, installed with the ``http`` extra (``pip install "aretry[http]"``).

Example:
    ```pycon
    >>> import asyncio
    >>> from aretry.http import request_async
    >>> response = asyncio.run(
    ...     request_async("GET", "https://api.example.com/data", retries=3)
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["DEFAULT_TIMEOUT", "RETRY_STATUS_CODES", "request_async"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from aretry.core.controller import retry
from aretry.exceptions import AbortError, HttpRequestError

if TYPE_CHECKING:
    from aretry.config import RetryOptions

logger: logging.Logger = logging.getLogger(__name__)

# Default timeout in seconds when request_async creates its own client
DEFAULT_TIMEOUT = 10.0

# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


def check_response(
    response: httpx.Response,
    method: str,
    url: str,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
) -> httpx.Response:
    """Return the response if it succeeded, raise otherwise.

    Raises:
        HttpRequestError: If the status code is in ``status_forcelist``.
        AbortError: Wrapping an ``HttpRequestError`` for any other status
            code >= 400.
    """
    if response.status_code < 400:
        return response
    error = HttpRequestError(
        method=method,
        url=url,
        message=f"{method} request to {url} failed with status {response.status_code}",
        status_code=response.status_code,
        response=response,
    )
    if response.status_code in status_forcelist:
        raise error
    logger.debug(f"{method} request to {url} failed with non-retryable status {response.status_code}")
    raise AbortError(error)


async def request_async(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
    options: RetryOptions | None = None,
    retry_options: dict[str, Any] | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send an HTTP request, retrying transient failures.

    Args:
        method: The HTTP method (GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS).
        url: The URL to send the request to.
        client: An optional ``httpx.AsyncClient``. If ``None``, a new client
            is created and closed after use.
        timeout: Maximum seconds to wait for the server response. Only used
            if ``client`` is ``None``.
        status_forcelist: HTTP status codes that trigger a retry.
        options: The retry options.
        retry_options: Fields overriding ``options``, e.g.
            ``{"retries": 3, "min_timeout": 0.5}``.
        **kwargs: Additional keyword arguments passed to
            ``httpx.AsyncClient.request``.

    Returns:
        The first response with a status code < 400.

    Raises:
        HttpRequestError: If the server answered with a non-retryable
            status code, or with a retryable one until the retries ran out.
        httpx.RequestError: If the request kept failing at the transport
            level until the retries ran out.
    """
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)

    async def send(attempt_number: int) -> httpx.Response:
        logger.debug(f"{method} {url} (attempt {attempt_number})")
        response = await client.request(method, url, **kwargs)
        return check_response(response, method, url, status_forcelist)

    try:
        return await retry(send, options, **(retry_options or {}))
    finally:
        if owns_client:
            await client.aclose()
