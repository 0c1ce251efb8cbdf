"""Crawl infrastructure checks: robots.txt and sitemap.xml."""

import re
from typing import Optional

from .models import SiteInfo

SITEMAP_DIRECTIVE = re.compile(r"^\s*sitemap:\s*(\S+)", re.IGNORECASE | re.MULTILINE)
LOC_TAG = re.compile(r"<loc>", re.IGNORECASE)


def _directive(line: str) -> tuple[str, str]:
    """Split ``Field: value`` into a lower-cased field and its value."""
    line = line.split("#", 1)[0]
    name, _, value = line.partition(":")
    return name.strip().lower(), value.strip()


def blocks_all_crawlers(robots_txt: str) -> bool:
    """Whether a ``User-agent: *`` group opens with ``Disallow: /``.

    Only the first Disallow rule of each wildcard group counts, so a site
    that disallows a single folder is not flagged.
    """
    in_wildcard_group = False
    in_rules = False
    disallow_seen = False
    for line in robots_txt.splitlines():
        name, value = _directive(line)
        if name == "user-agent":
            if in_rules:
                # a user-agent line after rules starts a new group
                in_wildcard_group = False
                in_rules = False
                disallow_seen = False
            in_wildcard_group = in_wildcard_group or value == "*"
        elif name in ("allow", "disallow"):
            in_rules = True
            if name == "disallow" and not disallow_seen:
                disallow_seen = True
                if in_wildcard_group and value == "/":
                    return True
    return False


def sitemap_from_robots(robots_txt: str) -> Optional[str]:
    match = SITEMAP_DIRECTIVE.search(robots_txt)
    return match.group(1) if match else None


def count_sitemap_pages(sitemap_xml: str) -> int:
    """Number of ``<loc>`` entries; sitemap indexes are not followed."""
    return len(LOC_TAG.findall(sitemap_xml))


def extract_site_info(
    robots_txt: Optional[str],
    sitemap_xml: Optional[str],
    origin: str,
) -> SiteInfo:
    """Summarise robots.txt and sitemap.xml for a site.

    Args:
        robots_txt: Body of /robots.txt, or None when it could not be fetched
        sitemap_xml: Body of /sitemap.xml, or None when it could not be fetched
        origin: Scheme and host of the audited site

    Returns:
        SiteInfo describing the crawl setup
    """
    sitemap_url = sitemap_from_robots(robots_txt) if robots_txt is not None else None
    if sitemap_url is None and sitemap_xml is not None:
        sitemap_url = f"{origin}/sitemap.xml"

    return SiteInfo(
        has_robots=robots_txt is not None,
        has_sitemap=sitemap_xml is not None,
        blocked_by_crawlers=blocks_all_crawlers(robots_txt) if robots_txt is not None else False,
        sitemap_url=sitemap_url,
        page_count=count_sitemap_pages(sitemap_xml) if sitemap_xml is not None else None,
    )
