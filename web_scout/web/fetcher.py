"""Web page fetcher: HTTP GET followed by the extraction pipeline."""

from typing import Dict, Optional

import httpx

from web_scout.errors import FetchFailed
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger
from web_scout.web.extractor import ExtractedArticle, extract

log = get_logger(__name__)


def browser_headers() -> Dict[str, str]:
    return {
        "User-Agent": settings.fetch_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


async def fetch_page(
    url: str,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """GET a URL, following redirects.  Raises FetchFailed on any failure."""
    try:
        async with httpx.AsyncClient(
            timeout=timeout or settings.fetch_timeout,
            follow_redirects=True,
            headers=browser_headers(),
            transport=transport,
        ) as client:
            resp = await client.get(url)
    except httpx.TimeoutException as exc:
        log.warning("Timed out fetching %s", url)
        raise FetchFailed(f"Request timed out: {url}", cause=exc) from exc
    except httpx.HTTPError as exc:
        log.warning("Failed to fetch %s", url)
        raise FetchFailed(f"Request failed: {exc}", cause=exc) from exc

    if not resp.is_success:
        raise FetchFailed(
            f"HTTP {resp.status_code}: {resp.reason_phrase}",
            context={"url": url, "status": resp.status_code},
        )
    return resp


async def fetch_url(
    url: str,
    selector: Optional[str] = None,
    max_length: Optional[int] = None,
    include_links: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ExtractedArticle:
    """Fetch *url* and return its readable content.

    Raises:
        FetchFailed: non-2xx status, timeout or network error.
        NoContentFound: the page has no article-like region.
    """
    log.info("Fetching %s", url)
    resp = await fetch_page(url, transport=transport)
    return extract(
        resp.text,
        source_url=str(resp.url),
        content_type=resp.headers.get("content-type", ""),
        selector=selector,
        max_length=max_length,
        include_links=include_links,
    )
