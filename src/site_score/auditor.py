"""Main auditor: fetch everything in parallel, then score."""

import asyncio
import ipaddress
import logging
import re
import time
from typing import Any, Optional, Union
from urllib.parse import urlparse

import httpx

from .config import Settings, get_settings
from .crawl import extract_site_info
from .errors import InvalidURLError, UpstreamTimeoutError
from .keywords import extract_keywords, keyword_coverage
from .models import AuditResult, HealthSummary, LighthouseReport, PageSignals, Priority, SiteInfo
from .pagespeed import parse_response, run_pagespeed
from .pillars import (
    score_accessibility,
    score_aeo_readiness,
    score_content_keywords,
    score_geo_readiness,
    score_performance,
    score_technical_seo,
)
from .recommendations import build_recommendations, split_for_display
from .signals import extract_signals

logger = logging.getLogger(__name__)

_HOST_LABEL = re.compile(r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)$")
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def default_headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def normalize_url(url: str) -> str:
    """Ensure URL has a scheme."""
    url = url.strip()
    match = _SCHEME.match(url)
    if match is None:
        return "https://" + url
    return match.group(0).lower() + url[match.end():]


def _valid_host(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    labels = ascii_host.rstrip(".").split(".")
    return all(_HOST_LABEL.match(label) for label in labels)


def validate_url(url: str) -> str:
    """Check a normalised URL and return its origin.

    Raises:
        InvalidURLError: the URL cannot be audited
    """
    invalid = InvalidURLError("That doesn't look like a valid URL. Try something like example.com")
    if any(ch.isspace() for ch in url):
        raise invalid
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise invalid
    try:
        parsed.port
    except ValueError:
        raise invalid
    if not _valid_host(parsed.hostname):
        raise invalid
    return f"{parsed.scheme}://{parsed.netloc}"


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    max_bytes: int,
) -> Optional[str]:
    """GET a page, reading at most ``max_bytes`` of its body.

    Returns ``None`` for a non-2xx status or a blank body.
    """
    async with client.stream("GET", url, timeout=timeout) as response:
        if not response.is_success:
            logger.debug("[auditor] unavailable url=%s status=%d", url, response.status_code)
            return None
        body = bytearray()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            if len(body) >= max_bytes:
                logger.debug("[auditor] truncated url=%s max_bytes=%d", url, max_bytes)
                break
        text = bytes(body[:max_bytes]).decode(response.encoding or "utf-8", errors="replace")
    return text if text.strip() else None


def _optional_text(outcome: Union[Optional[str], BaseException], what: str) -> Optional[str]:
    if isinstance(outcome, BaseException):
        logger.debug("[auditor] %s unavailable error=%r", what, outcome)
        return None
    return outcome


async def fetch_sources(
    client: httpx.AsyncClient,
    url: str,
    origin: str,
    settings: Settings,
) -> tuple[LighthouseReport, Optional[str], Optional[str], Optional[str]]:
    """Run PageSpeed and fetch the page, robots.txt and sitemap.xml together.

    Only PageSpeed is mandatory; its failures propagate as AuditError.
    """
    timeout = settings.fetch_timeout
    max_bytes = settings.max_page_bytes
    outcomes = await asyncio.gather(
        run_pagespeed(
            client,
            settings.pagespeed_endpoint,
            url,
            settings.pagespeed_api_key,
            settings.pagespeed_timeout,
        ),
        fetch_text(client, url, timeout, max_bytes),
        fetch_text(client, f"{origin}/robots.txt", timeout, max_bytes),
        fetch_text(client, f"{origin}/sitemap.xml", timeout, max_bytes),
        return_exceptions=True,
    )
    psi, page, robots, sitemap = outcomes

    lighthouse = parse_response(psi)
    return (
        lighthouse,
        _optional_text(page, "html"),
        _optional_text(robots, "robots.txt"),
        _optional_text(sitemap, "sitemap.xml"),
    )


def build_result(
    url: str,
    lighthouse: LighthouseReport,
    signals: PageSignals,
    site: SiteInfo,
    settings: Optional[Settings] = None,
) -> AuditResult:
    """Score already-fetched inputs. Pure: same inputs, same result."""
    settings = settings or get_settings()

    keywords = extract_keywords(signals, url)
    pillars = [
        score_performance(lighthouse.performance),
        score_technical_seo(lighthouse, signals, url, site),
        score_content_keywords(signals, keywords),
        score_geo_readiness(signals),
        score_aeo_readiness(signals),
        score_accessibility(lighthouse.accessibility, lighthouse.best_practices),
    ]

    recommendations = build_recommendations(lighthouse, signals, site, keywords, url)
    shown, gated = split_for_display(
        recommendations,
        display_limit=settings.recommendations_display_limit,
        free_count=settings.free_recommendations,
    )

    health = HealthSummary(
        domain=urlparse(url).hostname or "",
        is_https=url.startswith("https://"),
        page_count=site.page_count,
        has_robots=site.has_robots,
        has_sitemap=site.has_sitemap,
        blocked_by_crawlers=site.blocked_by_crawlers,
        critical_issues=sum(1 for r in recommendations if r.priority is Priority.CRITICAL),
        high_issues=sum(1 for r in recommendations if r.priority is Priority.HIGH),
        total_issues=len(recommendations),
        schema_types_found=signals.distinct_schema_types,
        html_fetch_error=signals.fetch_error,
    )

    return AuditResult(
        url=url,
        pillars=pillars,
        keywords=keywords,
        keyword_coverage=keyword_coverage(keywords),
        recommendations=shown,
        gated_count=gated,
        health=health,
    )


async def _audit(
    url: str,
    origin: str,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport],
) -> AuditResult:
    async with httpx.AsyncClient(
        headers=default_headers(settings.user_agent),
        follow_redirects=True,
        transport=transport,
    ) as client:
        lighthouse, html, robots_txt, sitemap_xml = await fetch_sources(client, url, origin, settings)

    signals = extract_signals(html, url) if html is not None else PageSignals.empty(fetch_error=True)
    site = extract_site_info(robots_txt, sitemap_xml, origin)
    return build_result(url, lighthouse, signals, site, settings)


async def run_audit(
    raw_url: Any,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AuditResult:
    """Run a complete audit on a URL.

    Args:
        raw_url: URL as submitted; a missing scheme defaults to https
        settings: Settings to use, defaults to the environment
        transport: Optional httpx transport, e.g. a MockTransport in tests

    Returns:
        AuditResult with every pillar scored

    Raises:
        AuditError: bad input, or PageSpeed failed
    """
    settings = settings or get_settings()
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise InvalidURLError("Please provide a valid URL.")

    url = normalize_url(raw_url)
    origin = validate_url(url)

    start_time = time.monotonic()
    logger.info("[auditor] start url=%s", url)
    try:
        result = await asyncio.wait_for(
            _audit(url, origin, settings, transport),
            timeout=settings.audit_timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("[auditor] timed out url=%s after=%.1fs", url, settings.audit_timeout)
        raise UpstreamTimeoutError("Analysis timed out. The site may be very slow. Try again in a moment.")

    logger.info(
        "[auditor] done url=%s score=%d html_error=%s elapsed_ms=%d",
        url,
        result.score,
        result.health.html_fetch_error,
        int((time.monotonic() - start_time) * 1000),
    )
    return result


def audit_url(url: str, settings: Optional[Settings] = None) -> AuditResult:
    """Blocking wrapper around :func:`run_audit` for the CLI."""
    return asyncio.run(run_audit(url, settings=settings))
