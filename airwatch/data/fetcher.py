"""Deadline-bounded execution of a single provider request."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import requests

from .models import Failure, FailureKind

LOGGER = logging.getLogger(__name__)

TIMEOUT_MESSAGE = (
    "Request timed out. The API may be blocked in your network or region. Try using a VPN."
)
NETWORK_MESSAGE = "Network error. Please check your connection."
INVALID_RESPONSE_MESSAGE = "The service returned a response that could not be read."


async def get_json(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, object]] = None,
    timeout: float = 10.0,
) -> Any:
    """Issue a GET on a worker thread and decode the JSON body."""

    def _request() -> Any:
        response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()

    return await asyncio.to_thread(_request)


async def fetch_bounded(
    request: Callable[[], Awaitable[Any]], timeout: float
) -> Union[Any, Failure]:
    """Await ``request()`` under a deadline of ``timeout`` seconds.

    Returns whatever the request produced, or a :class:`Failure` when the
    deadline expires first (the pending request is cancelled), the network
    call fails, or the body cannot be decoded.
    """
    try:
        return await asyncio.wait_for(request(), timeout)
    except (asyncio.TimeoutError, requests.Timeout):
        LOGGER.warning("Request exceeded its %.1fs deadline", timeout)
        return Failure(FailureKind.TIMEOUT, TIMEOUT_MESSAGE)
    except requests.HTTPError as err:
        status = err.response.status_code if err.response is not None else "unknown"
        LOGGER.warning("Request rejected with HTTP %s", status)
        return Failure(FailureKind.API_ERROR, f"The service responded with HTTP {status}.")
    except ValueError:
        # requests' JSONDecodeError is also a ValueError
        LOGGER.warning("Response body is not valid JSON")
        return Failure(FailureKind.API_ERROR, INVALID_RESPONSE_MESSAGE)
    except requests.RequestException as err:
        LOGGER.warning("Request failed: %s", err)
        return Failure(FailureKind.NETWORK, NETWORK_MESSAGE)
