"""Google PageSpeed Insights client helpers."""

import logging
from typing import Any, Optional, Union

import httpx

from .errors import (
    RateLimitedError,
    UnusableResultError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .models import LighthouseReport

logger = logging.getLogger(__name__)

CATEGORIES = ("performance", "seo", "accessibility", "best-practices")
STRATEGY = "mobile"


def build_params(url: str, api_key: Optional[str] = None) -> list[tuple[str, str]]:
    """Query parameters for a mobile run covering all four categories."""
    params = [("url", url), ("strategy", STRATEGY)]
    if api_key:
        params.append(("key", api_key))
    params.extend(("category", c) for c in CATEGORIES)
    return params


async def run_pagespeed(
    client: httpx.AsyncClient,
    endpoint: str,
    url: str,
    api_key: Optional[str],
    timeout: float,
) -> httpx.Response:
    return await client.get(endpoint, params=build_params(url, api_key), timeout=timeout)


def _category_score(categories: dict[str, Any], name: str) -> float:
    category = categories.get(name) or {}
    score = category.get("score")
    return float(score) if isinstance(score, (int, float)) else 0.0


def parse_response(outcome: Union[httpx.Response, BaseException]) -> LighthouseReport:
    """Turn a PageSpeed response (or the exception raised fetching it) into scores.

    Raises:
        UpstreamTimeoutError: the call failed or timed out
        RateLimitedError: PageSpeed answered 429
        UpstreamError: PageSpeed answered garbage or a server error
        UnusableResultError: PageSpeed answered without a Lighthouse result
    """
    if isinstance(outcome, BaseException):
        logger.warning("[pagespeed] request failed error=%r", outcome)
        raise UpstreamTimeoutError("Analysis timed out. The site may be very slow or down.")

    if outcome.status_code == 429:
        raise RateLimitedError("Rate limit reached. Please wait 30 seconds and try again.")

    try:
        data = outcome.json()
    except ValueError:
        logger.warning("[pagespeed] non-JSON response status=%d", outcome.status_code)
        raise UpstreamError("PageSpeed returned an unreadable response. Please try again.")

    if not isinstance(data, dict):
        raise UpstreamError("PageSpeed returned an unreadable response. Please try again.")

    error = data.get("error") or {}
    code = error.get("code") if isinstance(error, dict) else None
    if code == 429:
        raise RateLimitedError("Rate limit reached. Please wait 30 seconds and try again.")

    result = data.get("lighthouseResult")
    if not isinstance(result, dict):
        logger.warning("[pagespeed] no lighthouse result status=%d code=%s", outcome.status_code, code)
        if isinstance(code, int) and code >= 500:
            raise UpstreamError("PageSpeed is having trouble right now. Please try again shortly.")
        raise UnusableResultError("Could not analyse this URL. Make sure it's publicly accessible.")

    categories = result.get("categories") or {}
    audits = result.get("audits") or {}
    canonical = audits.get("canonical") or {}
    canonical_score = canonical.get("score")

    return LighthouseReport(
        performance=_category_score(categories, "performance"),
        seo=_category_score(categories, "seo"),
        accessibility=_category_score(categories, "accessibility"),
        best_practices=_category_score(categories, "best-practices"),
        canonical_audit_passed=isinstance(canonical_score, (int, float)) and canonical_score >= 1,
    )
