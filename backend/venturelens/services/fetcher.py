# backend/venturelens/services/fetcher.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from ..core.config import get_settings
from ..core.errors import HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPage:
    url: str
    status_code: int
    html: str


async def fetch_page(url: str, *, client: httpx.AsyncClient | None = None) -> RawPage:
    """
    Fetch a company website once (no retries) and return its raw HTML.

    Redirects are followed and FETCH_TIMEOUT_SECONDS bounds the whole
    exchange, body included. Transport failures and timeouts raise
    ``NetworkError``; a non-2xx final status raises ``HttpStatusError``.
    An explicit ``client`` lets callers share a pool or inject a transport.
    """
    settings = get_settings()
    timeout = settings.FETCH_TIMEOUT_SECONDS
    headers = {"User-Agent": settings.FETCH_USER_AGENT}

    async def _get(c: httpx.AsyncClient) -> httpx.Response:
        try:
            # httpx timeouts apply per phase; wait_for caps the whole exchange
            return await asyncio.wait_for(
                c.get(url, headers=headers, follow_redirects=True, timeout=timeout),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning(
                "Website fetch timed out after %ss: %s",
                timeout,
                e,
                extra={"website": url, "stage": "fetch"},
            )
            raise NetworkError(
                f"Website did not respond within {timeout:g} seconds."
            ) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise NetworkError(f"Could not reach website: invalid URL ({e}).") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Website fetch failed: %s",
                e,
                extra={"website": url, "stage": "fetch"},
            )
            raise NetworkError(
                f"Could not reach website: {type(e).__name__}."
            ) from e

    if client is not None:
        resp = await _get(client)
    else:
        async with httpx.AsyncClient() as owned:
            resp = await _get(owned)

    if not resp.is_success:
        logger.warning(
            "Website returned HTTP %s",
            resp.status_code,
            extra={"website": url, "stage": "fetch"},
        )
        raise HttpStatusError(resp.status_code)

    return RawPage(url=str(resp.url), status_code=resp.status_code, html=resp.text)
