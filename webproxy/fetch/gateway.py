import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from webproxy.core.config import settings
from webproxy.core.errors import FetchFailed, InvalidInput
from webproxy.fetch.base import DEFAULT_CONTENT_TYPE, FetchResult

logger = logging.getLogger(__name__)

_SCHEMES = ("http://", "https://")


def normalize_target(target: str) -> str:
    """
    Turn a user-supplied target into an absolute http(s) URL.

    Examples: "example.com" -> "https://example.com",
    "http://example.com/a" -> "http://example.com/a" (untouched)
    """
    value = (target or "").strip()
    if not value:
        raise InvalidInput("URL is required")

    if not value.lower().startswith(_SCHEMES):
        value = "https://" + value

    try:
        parsed = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidInput(f"Invalid URL: {value}", details=str(e)) from e

    if not parsed.host:
        raise InvalidInput(f"Invalid URL: {value}", details="missing host")

    return value


async def _get(url: str, transport: Optional[httpx.AsyncBaseTransport]) -> httpx.Response:
    headers = {"User-Agent": settings.USER_AGENT}
    async with httpx.AsyncClient(
        timeout=settings.REQUEST_TIMEOUT,
        headers=headers,
        follow_redirects=True,
        max_redirects=settings.MAX_REDIRECTS,
        transport=transport,
    ) as client:
        return await client.get(url)


async def fetch(target: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> FetchResult:
    """
    Fetch a target with a single GET: fixed User-Agent, bounded redirects,
    no retries.

    httpx's timeout applies per connect/read/write, so the whole exchange
    (redirects and body included) also runs under one total deadline.
    """
    url = normalize_target(target)

    try:
        logger.info("Fetching %s", url)
        response = await asyncio.wait_for(_get(url, transport), timeout=settings.REQUEST_TIMEOUT)
    except asyncio.TimeoutError as e:
        logger.warning("Deadline of %ss exceeded while fetching %s", settings.REQUEST_TIMEOUT, url)
        raise FetchFailed(f"Timeout while fetching {url}", code="Timeout") from e
    except httpx.TimeoutException as e:
        logger.warning("Timeout while fetching %s: %r", url, e)
        raise FetchFailed(f"Timeout while fetching {url}", code=type(e).__name__) from e
    except httpx.TooManyRedirects as e:
        logger.warning("Too many redirects for %s", url)
        raise FetchFailed(f"Too many redirects for {url}", code="TooManyRedirects") from e
    except httpx.HTTPError as e:
        logger.warning("Failed to fetch %s: %r", url, e)
        raise FetchFailed(f"Failed to fetch {url}: {e}", code=type(e).__name__) from e

    if not response.is_success:
        logger.warning("HTTP error %s for %s", response.status_code, url)
        raise FetchFailed(
            f"HTTP error {response.status_code} for {url}",
            code="HTTPStatusError",
            upstream_status=response.status_code,
        )

    return FetchResult(
        url=url,
        final_url=str(response.url),
        content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        body=response.content,
        encoding=response.encoding,
        fetched_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
    )
