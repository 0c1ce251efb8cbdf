"""Technical SEO pillar."""

from urllib.parse import urlparse

from ..models import Check, LighthouseReport, PageSignals, PillarResult, SiteInfo, round_half_up

MAX_POINTS = 25
LIGHTHOUSE_POINTS = 8

TITLE_RANGE = (30, 65)
DESCRIPTION_RANGE = (120, 165)


def _alt_points(signals: PageSignals) -> int:
    # a page without images has nothing to fix
    if signals.total_images == 0:
        return 4
    coverage = signals.alt_coverage
    if coverage >= 1:
        return 4
    elif coverage >= 0.75:
        return 3
    elif coverage >= 0.5:
        return 2
    elif coverage > 0:
        return 1
    return 0


def _title_detail(signals: PageSignals, good_length: bool) -> str:
    if not signals.title:
        return "Missing title tag"
    shown = signals.title[:60] + ("…" if signals.title_length > 60 else "")
    verdict = " ✓" if good_length else " (ideal: 30-65)"
    return f'"{shown}" ({signals.title_length} chars{verdict})'


def score_technical_seo(
    lighthouse: LighthouseReport,
    signals: PageSignals,
    page_url: str,
    site: SiteInfo,
) -> PillarResult:
    """Score crawlability and on-page technical basics.

    Key factors:
    - Lighthouse SEO category
    - title and meta description presence and length
    - clean URL path
    - robots.txt and sitemap.xml
    - canonical URL and indexability
    - image alt text
    """
    checks: list[Check] = []
    points = 0

    # Lighthouse SEO foundation
    lh_seo = lighthouse.seo
    points += round_half_up(lh_seo * LIGHTHOUSE_POINTS)
    checks.append(Check(
        label="Lighthouse SEO foundation",
        passed=lh_seo >= 0.7,
        detail=f"{round_half_up(lh_seo * 100)}/100. Covers crawlability, link text and font sizes",
    ))

    # Title tag
    has_title = bool(signals.title)
    good_title = TITLE_RANGE[0] <= signals.title_length <= TITLE_RANGE[1]
    points += int(has_title) + int(good_title) + int(has_title and signals.title_length > 10)
    checks.append(Check(
        label="Title tag",
        passed=has_title and good_title,
        detail=_title_detail(signals, good_title),
    ))

    # Meta description
    has_desc = bool(signals.meta_description)
    good_desc = DESCRIPTION_RANGE[0] <= signals.meta_description_length <= DESCRIPTION_RANGE[1]
    points += 2 * int(has_desc) + int(good_desc)
    if has_desc:
        desc_detail = f"{signals.meta_description_length} chars" + (" ✓" if good_desc else " (ideal: 120-165)")
    else:
        desc_detail = "Missing. Search engines will generate random snippets"
    checks.append(Check(label="Meta description", passed=has_desc and good_desc, detail=desc_detail))

    # URL structure
    path = urlparse(page_url).path
    url_points = int("_" not in path) + int(len(path) < 100)
    points += url_points
    checks.append(Check(
        label="URL structure",
        passed=url_points == 2,
        detail="Clean URL with hyphens, good length" if url_points == 2
        else "Uses underscores or a very long URL path",
    ))

    # Robots + sitemap
    points += int(site.has_robots) + 2 * int(site.has_sitemap)
    if not site.has_robots:
        robots_detail = "Missing. Search engines won't know your crawl rules"
    elif site.blocked_by_crawlers:
        robots_detail = "Exists but blocks all crawlers!"
    else:
        robots_detail = "Accessible and valid"
    checks.append(Check(label="Robots.txt", passed=site.has_robots, detail=robots_detail))

    if site.has_sitemap:
        sitemap_detail = f"Found, ~{site.page_count} pages listed" if site.page_count else "Found"
    else:
        sitemap_detail = "Missing. Google can't discover all your pages"
    checks.append(Check(label="XML Sitemap", passed=site.has_sitemap, detail=sitemap_detail))

    # Canonical + indexability
    has_canonical = bool(signals.canonical_url) or lighthouse.canonical_audit_passed
    indexable = "noindex" not in (signals.robots_meta or "").lower()
    points += int(has_canonical) + int(indexable)
    if has_canonical:
        canonical_detail = signals.canonical_url or "Declared via HTTP header"
    else:
        canonical_detail = "Missing. Risks duplicate content penalties"
    checks.append(Check(label="Canonical URL", passed=has_canonical, detail=canonical_detail))
    checks.append(Check(
        label="Indexable",
        passed=indexable,
        detail="No noindex directive" if indexable else f'Robots meta says "{signals.robots_meta}"',
    ))

    # Image alt text
    alt_points = _alt_points(signals)
    points += alt_points
    if signals.total_images == 0:
        alt_detail = "No images found"
    else:
        pct = round_half_up(signals.alt_coverage * 100)
        alt_detail = f"{signals.images_with_alt}/{signals.total_images} images have alt text ({pct}%)"
    checks.append(Check(label="Image alt text", passed=alt_points >= 3, detail=alt_detail))

    return PillarResult.build(
        key="technicalSeo",
        label="Technical SEO",
        description="Crawlability, meta tags, sitemap, HTTPS & alt text",
        points=points,
        max_points=MAX_POINTS,
        checks=checks,
    )
