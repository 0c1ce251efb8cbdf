"""Prioritised fix list built from audit signals."""

from .models import (
    Keyword,
    LighthouseReport,
    PageSignals,
    Priority,
    Recommendation,
    SiteInfo,
    round_half_up,
)


def build_recommendations(
    lighthouse: LighthouseReport,
    signals: PageSignals,
    site: SiteInfo,
    keywords: list[Keyword],
    page_url: str,
) -> list[Recommendation]:
    """Evaluate every rule and return the matches, most urgent first.

    Rules are independent; within a priority the rule order below is kept.
    """
    recs: list[Recommendation] = []
    perf = lighthouse.performance
    lh_seo = lighthouse.seo
    a11y = lighthouse.accessibility

    if not page_url.startswith("https://"):
        recs.append(Recommendation(
            id="https",
            priority=Priority.CRITICAL,
            category="Security",
            title="No HTTPS, site is not secure",
            description="Google demotes non-HTTPS sites in rankings. AI assistants avoid citing insecure sources.",
            fix="Install a free SSL certificate via Let's Encrypt. Most hosts offer this in one click.",
        ))

    if perf < 0.5:
        recs.append(Recommendation(
            id="perf",
            priority=Priority.CRITICAL,
            category="Performance",
            title="Site loads dangerously slowly",
            description=f"Performance score: {round_half_up(perf * 100)}/100. Over half of mobile users "
                        "leave if a page takes more than 3 seconds.",
            fix="Compress images to WebP, remove unused JavaScript, enable browser caching, and use a CDN.",
        ))
    elif perf < 0.75:
        recs.append(Recommendation(
            id="perf-med",
            priority=Priority.HIGH,
            category="Performance",
            title="Page speed needs improvement",
            description=f"Performance score: {round_half_up(perf * 100)}/100. "
                        "Faster pages rank higher and convert better.",
            fix="Optimise images, defer non-critical scripts, and consider a CDN.",
        ))

    if not signals.h1:
        recs.append(Recommendation(
            id="h1",
            priority=Priority.CRITICAL,
            category="Content SEO",
            title="Missing H1 tag",
            description="Every page needs exactly one H1. It tells search engines and AI what the page is about.",
            fix="Add one clear H1 that contains your primary keyword and matches the intent of the page.",
        ))

    if not signals.meta_description:
        recs.append(Recommendation(
            id="meta-desc",
            priority=Priority.HIGH,
            category="Technical SEO",
            title="No meta description",
            description="Without one, search results and AI citations show random, unhelpful previews.",
            fix="Write a 120-165 character meta description with your primary keyword and a clear value "
                "proposition.",
        ))

    if not signals.has_faq_schema and not signals.has_howto_schema:
        recs.append(Recommendation(
            id="faq-schema",
            priority=Priority.HIGH,
            category="AEO Readiness",
            title="Missing FAQ / HowTo schema",
            description="FAQ and HowTo schema enable rich results and raise the chance of being cited by AI.",
            fix="Add FAQPage schema to any page with Q&A content.",
        ))

    if not signals.has_org_schema and not signals.has_local_business_schema:
        recs.append(Recommendation(
            id="org-schema",
            priority=Priority.HIGH,
            category="GEO Readiness",
            title="No Organization or LocalBusiness schema",
            description="AI search uses this schema to identify who you are. Without it you are unknown to it.",
            fix="Add Organization schema with your business name, URL, logo, social profiles and contact details.",
        ))

    if not site.has_sitemap:
        recs.append(Recommendation(
            id="sitemap",
            priority=Priority.HIGH,
            category="Technical SEO",
            title="No XML sitemap found",
            description="Without a sitemap Google has to discover pages through links, so some may never "
                        "be indexed.",
            fix="Generate an XML sitemap and submit it to Google Search Console.",
        ))

    if keywords and not keywords[0].in_title and not keywords[0].in_h1:
        word = keywords[0].word
        recs.append(Recommendation(
            id="kw-coverage",
            priority=Priority.HIGH,
            category="Content SEO",
            title=f'Primary keyword "{word}" not in title or H1',
            description="Your most frequent keyword is missing from the title tag and H1, the two strongest "
                        "on-page signals.",
            fix=f'Include "{word}" naturally in your page title and H1 heading.',
        ))

    if signals.total_images > 0 and signals.alt_coverage < 0.5:
        missing = signals.total_images - signals.images_with_alt
        recs.append(Recommendation(
            id="alt-text",
            priority=Priority.MEDIUM,
            category="Technical SEO",
            title=f"{missing} images missing alt text",
            description="Alt text helps Google understand your images and improves accessibility.",
            fix="Add descriptive, accurate alt text to every image.",
        ))

    if lh_seo < 0.7:
        recs.append(Recommendation(
            id="lh-seo",
            priority=Priority.CRITICAL if lh_seo < 0.5 else Priority.HIGH,
            category="Technical SEO",
            title="Basic SEO fundamentals failing",
            description=f"Lighthouse SEO: {round_half_up(lh_seo * 100)}/100. Issues may include "
                        "non-descriptive link text, a missing viewport or crawl blocks.",
            fix="Run a Lighthouse audit in Chrome DevTools for the exact list of failing checks.",
        ))

    if signals.question_h2_count == 0 and not signals.has_faq_schema:
        recs.append(Recommendation(
            id="aeo-content",
            priority=Priority.MEDIUM,
            category="AEO Readiness",
            title="Content not structured for AI answers",
            description="Answer engines prefer question/answer formatting. None of your headings are questions.",
            fix="Rewrite H2s as questions ('How does X work?') and answer each in the following paragraph.",
        ))

    if a11y < 0.7:
        recs.append(Recommendation(
            id="a11y",
            priority=Priority.MEDIUM,
            category="Accessibility",
            title="Accessibility issues found",
            description=f"Accessibility score: {round_half_up(a11y * 100)}/100. Common issues: missing alt "
                        "text, low colour contrast, unlabelled forms.",
            fix="Run axe DevTools on your pages and fix contrast issues, alt text and aria labels.",
        ))

    # sorted() is stable, so rule order survives within a priority
    return sorted(recs, key=lambda r: r.priority.rank)


def split_for_display(
    recs: list[Recommendation],
    display_limit: int = 8,
    free_count: int = 3,
) -> tuple[list[Recommendation], int]:
    """Recommendations to send and how many sit behind the paid report."""
    return recs[:display_limit], max(0, len(recs) - free_count)
