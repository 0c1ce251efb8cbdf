"""Content & keywords pillar."""

from ..models import Check, Keyword, PageSignals, PillarResult

MAX_POINTS = 20


def _depth_points(word_count: int) -> int:
    if word_count >= 2000:
        return 4
    elif word_count >= 1000:
        return 3
    elif word_count >= 500:
        return 2
    elif word_count >= 200:
        return 1
    return 0


def _zones_found(keyword: Keyword) -> str:
    zones = [
        name for name, hit in (
            ("title", keyword.in_title),
            ("H1", keyword.in_h1),
            ("meta desc", keyword.in_meta_description),
            ("URL", keyword.in_url),
        ) if hit
    ]
    return ", ".join(zones) or "none of the key locations"


def score_content_keywords(signals: PageSignals, keywords: list[Keyword]) -> PillarResult:
    """Score heading structure, keyword placement, depth and Open Graph.

    ``keywords`` must be ranked, primary keyword first.
    """
    checks: list[Check] = []
    points = 0

    # Heading structure
    h1_count = len(signals.h1)
    has_h2s = len(signals.h2) >= 2
    points += 2 * int(h1_count > 0) + int(h1_count == 1) + int(has_h2s)
    if h1_count == 0:
        h1_detail = "No H1 found, critical for SEO"
    elif h1_count > 1:
        h1_detail = f"Multiple H1s found ({h1_count}). Use only one"
    else:
        h1_detail = f'"{signals.h1[0][:60]}"'
    checks.append(Check(label="H1 tag", passed=h1_count == 1, detail=h1_detail))
    checks.append(Check(
        label="Heading hierarchy (H2s)",
        passed=has_h2s,
        detail=f"{len(signals.h2)} H2 tags found"
        + (" ✓" if has_h2s else ". Add H2s to structure content for readers and crawlers"),
    ))

    # Keyword coverage
    if keywords:
        primary = keywords[0]
        covered = sum(primary.zone_flags)
        points += min(covered * 2, 8)
        checks.append(Check(
            label="Primary keyword coverage",
            passed=covered >= 3,
            detail=f'"{primary.word}" found in: {_zones_found(primary)}',
        ))
        if len(keywords) > 1:
            secondary = keywords[1]
            secondary_covered = sum([secondary.in_title, secondary.in_h1, secondary.in_meta_description])
            checks.append(Check(
                label="Secondary keyword signals",
                passed=secondary_covered >= 2,
                detail=f'"{secondary.word}" present in {secondary_covered}/3 key locations',
            ))
    else:
        checks.append(Check(
            label="Keyword signals",
            passed=False,
            detail="Unable to extract keywords. The page may be JavaScript-rendered",
        ))

    # Content depth
    depth_points = _depth_points(signals.word_count)
    points += depth_points
    if signals.word_count >= 1000:
        depth_verdict = "good depth"
    elif signals.word_count >= 500:
        depth_verdict = "adequate"
    else:
        depth_verdict = "thin content, consider expanding"
    checks.append(Check(
        label="Content depth",
        passed=depth_points >= 2,
        detail=f"~{signals.word_count:,} words, {depth_verdict}",
    ))

    # Open Graph
    og_present = sum(1 for v in (signals.og_title, signals.og_description, signals.og_image) if v)
    points += {3: 4, 2: 2, 1: 1}.get(og_present, 0)
    og_detail = f"{og_present}/3 OG tags present (title, description, image)"
    if og_present < 3:
        og_detail += ". Affects how links appear on social media and to AI crawlers"
    checks.append(Check(label="Open Graph tags", passed=og_present == 3, detail=og_detail))

    return PillarResult.build(
        key="contentKeywords",
        label="Content & Keywords",
        description="Keyword placement, heading structure & content depth",
        points=points,
        max_points=MAX_POINTS,
        checks=checks,
    )
