"""Extract SEO, GEO and AEO signals from a page's HTML."""

import json
import logging
import re
from typing import Any, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from .models import PageSignals

logger = logging.getLogger(__name__)

BODY_TEXT_LIMIT = 5000

QUESTION_START = re.compile(
    r"^(how|what|why|when|where|who|which|can|does|is|are|do|will|should)\b",
    re.IGNORECASE,
)

PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-.()]{7,}\d")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")
ADDRESS_PATTERN = re.compile(
    r"(street|avenue|boulevard|road|lane|drive|suite|floor|\d{5}|\bst\b|\bave\b|\bblvd\b)",
    re.IGNORECASE,
)
SOCIAL_PATTERN = re.compile(
    r"\b(linkedin\.com|twitter\.com|x\.com|facebook\.com|instagram\.com|youtube\.com)",
    re.IGNORECASE,
)

ARTICLE_TYPES = {"Article", "BlogPosting", "NewsArticle"}

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _text_of(tag: Tag) -> str:
    """Inner text with markup flattened to spaces."""
    return _collapse(tag.get_text(" "))


def _meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    """Content of ``<meta name=...>``, ``None`` when absent or blank."""
    tag = soup.find("meta", attrs={"name": re.compile(f"^{re.escape(name)}$", re.IGNORECASE)})
    if not tag:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def _origin(page_url: str) -> str:
    parsed = urlparse(page_url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def _schema_types(data: Any) -> list[str]:
    """Flatten ``@type`` values from a JSON-LD payload.

    Handles top-level arrays and ``@graph`` containers; nested entities
    (a publisher inside an Article, say) are not walked.
    """
    types: list[str] = []
    if isinstance(data, list):
        for item in data:
            types.extend(_schema_types(item))
        return types
    if not isinstance(data, dict):
        return types

    type_val = data.get("@type")
    values = type_val if isinstance(type_val, list) else [type_val]
    types.extend(v for v in values if isinstance(v, str))

    graph = data.get("@graph")
    if isinstance(graph, list):
        types.extend(_schema_types(graph))
    return types


def extract_json_ld_types(soup: BeautifulSoup) -> list[str]:
    """Collect schema types from every JSON-LD block, skipping broken ones."""
    types: list[str] = []
    scripts = soup.find_all("script", attrs={"type": re.compile(r"^application/ld\+json$", re.IGNORECASE)})
    for index, script in enumerate(scripts):
        try:
            data = json.loads(script.get_text())
        except json.JSONDecodeError:
            logger.debug("[signals] skipping malformed JSON-LD block index=%d", index)
            continue
        types.extend(_schema_types(data))
    return types


def _is_local_business(schema_type: str) -> bool:
    return (
        schema_type == "LocalBusiness"
        or schema_type.endswith("Store")
        or schema_type.endswith("Restaurant")
    )


def _count_links(soup: BeautifulSoup, origin: str) -> tuple[int, int]:
    internal = external = 0
    for tag in soup.find_all(href=True):
        href = tag["href"].strip()
        if not href or href.startswith("#"):
            continue
        if href.startswith("/") or (origin and origin in href):
            internal += 1
        elif href.startswith("http"):
            external += 1
    return internal, external


def _visible_text(soup: BeautifulSoup) -> str:
    """Page text without scripts, styles and inline SVG.

    Mutates ``soup``; call it last.
    """
    for tag in soup.find_all(["script", "style", "noscript", "svg"]):
        # nested blocks went with their parent
        if not tag.decomposed:
            tag.decompose()
    return _collapse(soup.get_text(" "))


def extract_signals(html: str, page_url: str) -> PageSignals:
    """Parse HTML into a fully populated :class:`PageSignals`.

    Args:
        html: Raw HTML of the page
        page_url: URL the HTML was fetched from, used to classify links

    Returns:
        PageSignals with every field set, empty values where nothing was found
    """
    soup = BeautifulSoup(html, "lxml")

    # Meta
    title_tag = soup.find("title")
    title = _text_of(title_tag) if title_tag else ""

    canonical_tag = soup.find("link", rel="canonical")
    canonical_url = (canonical_tag.get("href") or "").strip() if canonical_tag else ""

    html_tag = soup.find("html")
    language = (html_tag.get("lang") or "").strip() if html_tag else ""

    viewport = soup.find("meta", attrs={"name": re.compile(r"^viewport$", re.IGNORECASE)})

    # Headings
    h1 = [_text_of(h) for h in soup.find_all("h1")]
    h2 = [_text_of(h) for h in soup.find_all("h2")]
    h3 = [_text_of(h) for h in soup.find_all("h3")]

    # Images
    images = soup.find_all("img")
    images_with_alt = sum(1 for img in images if (img.get("alt") or "").strip())

    internal_links, external_links = _count_links(soup, _origin(page_url))

    # Open Graph, last tag wins
    open_graph: dict[str, str] = {}
    for tag in soup.find_all("meta", attrs={"property": re.compile(r"^og:", re.IGNORECASE)}):
        if tag.get("content") is None:
            continue
        open_graph[tag["property"][3:].lower()] = tag["content"].strip()

    # Schema.org
    schema_types = extract_json_ld_types(soup)

    question_h2_count = sum(1 for text in h2 if QUESTION_START.match(text))

    hreflang = soup.find("link", rel="alternate", hreflang=True)

    meta_description = _meta_content(soup, "description")
    robots_meta = _meta_content(soup, "robots")
    twitter_card = _meta_content(soup, "twitter:card")
    raw_has_social = bool(SOCIAL_PATTERN.search(html))
    has_ordered_lists = soup.find("ol") is not None
    has_unordered_lists = soup.find("ul") is not None

    text = _visible_text(soup)
    word_count = sum(1 for word in text.split(" ") if len(word) > 1)

    return PageSignals(
        title=title or None,
        meta_description=meta_description,
        canonical_url=canonical_url or None,
        language=language or None,
        has_viewport=viewport is not None,
        robots_meta=robots_meta,
        h1=h1,
        h2=h2,
        h3=h3,
        total_images=len(images),
        images_with_alt=images_with_alt,
        internal_links=internal_links,
        external_links=external_links,
        word_count=word_count,
        body_text=text[:BODY_TEXT_LIMIT],
        open_graph=open_graph,
        twitter_card=twitter_card,
        schema_types=schema_types,
        has_faq_schema="FAQPage" in schema_types,
        has_howto_schema="HowTo" in schema_types,
        has_org_schema="Organization" in schema_types,
        has_local_business_schema=any(_is_local_business(t) for t in schema_types),
        has_article_schema=any(t in ARTICLE_TYPES for t in schema_types),
        has_breadcrumb_schema="BreadcrumbList" in schema_types,
        has_website_schema="WebSite" in schema_types,
        question_h2_count=question_h2_count,
        has_ordered_lists=has_ordered_lists,
        has_unordered_lists=has_unordered_lists,
        has_phone=bool(PHONE_PATTERN.search(text)),
        has_email=bool(EMAIL_PATTERN.search(text)),
        has_address=bool(ADDRESS_PATTERN.search(text)),
        has_social_links=raw_has_social,
        has_hreflang=hreflang is not None,
        fetch_error=False,
    )
