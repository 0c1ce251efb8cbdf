"""GEO readiness: will AI assistants identify and cite this business?"""

from ..models import Check, PageSignals, PillarResult

MAX_POINTS = 20
SCHEMA_POINTS = 8
NAP_POINTS = 5
SOCIAL_POINTS = 4
CLARITY_POINTS = 3


def _listed(pairs: list[tuple[str, bool]], empty: str) -> str:
    return ", ".join(name for name, hit in pairs if hit) or empty


def score_geo_readiness(signals: PageSignals) -> PillarResult:
    """Score entity identity signals for generative engines.

    Key factors:
    - Organization / LocalBusiness schema, the strongest signal
    - breadth of Schema.org types
    - name / address / phone signals
    - social profiles and Open Graph completeness
    - declared language and structured, citable content
    """
    checks: list[Check] = []
    points = 0

    # Entity schema
    types = signals.distinct_schema_types
    has_any_schema = bool(types)
    has_entity = signals.has_org_schema or signals.has_local_business_schema
    variety = len(types)
    schema_points = (
        (5 if has_entity else 2 if has_any_schema else 0)
        + (2 if variety >= 3 else 1 if variety >= 2 else 0)
        + int(signals.has_website_schema)
    )
    points += min(schema_points, SCHEMA_POINTS)

    if has_entity:
        entity = "Organization" if signals.has_org_schema else "LocalBusiness"
        entity_detail = f"{entity} schema present ✓. AI systems can identify your business"
    elif has_any_schema:
        entity_detail = "Schema found but no entity type. Add Organization or LocalBusiness so AI knows who you are"
    else:
        entity_detail = ("No Schema.org at all. ChatGPT, Perplexity and Google AI Overviews rely on it "
                         "to identify and cite businesses")
    checks.append(Check(label="Entity schema (Org / LocalBusiness)", passed=has_entity, detail=entity_detail))

    if variety >= 3:
        variety_detail = f"{variety} schema types: {', '.join(types)} ✓"
    elif variety >= 1:
        variety_detail = (f"Only {variety} schema type(s). Add more (e.g. Service, Product, Review) "
                          "to help AI understand your full offering")
    else:
        variety_detail = "No structured data. AI systems are guessing what your site is about"
    checks.append(Check(label="Schema variety & coverage", passed=variety >= 2, detail=variety_detail))

    # NAP
    nap = 2 * int(signals.has_phone) + 2 * int(signals.has_address) + int(signals.has_email)
    points += min(nap, NAP_POINTS)
    found = _listed(
        [("phone", signals.has_phone), ("email", signals.has_email), ("address", signals.has_address)],
        "none",
    )
    checks.append(Check(
        label="NAP signals (Name, Address, Phone)",
        passed=nap >= 3,
        detail=f"Found: {found}. AI systems cross-reference contact info to validate a business",
    ))

    # Social & authority
    if signals.og_title and signals.og_description and signals.og_image:
        og_points = 2
    elif signals.og_title:
        og_points = 1
    else:
        og_points = 0
    social = 2 * int(signals.has_social_links) + og_points
    points += min(social, SOCIAL_POINTS)
    og_found = _listed(
        [("title", bool(signals.og_title)), ("desc", bool(signals.og_description)),
         ("image", bool(signals.og_image))],
        "missing",
    )
    checks.append(Check(
        label="Social profiles & OG completeness",
        passed=social >= 3,
        detail=f"Social links: {'found ✓' if signals.has_social_links else 'none'} · OG tags: {og_found}",
    ))

    # Content clarity
    clarity = int(bool(signals.language)) + int(signals.word_count >= 300) + int(len(signals.h2) >= 3)
    points += min(clarity, CLARITY_POINTS)
    checks.append(Check(
        label="Content clarity & extractability",
        passed=clarity >= 2,
        detail=(f"Language: {signals.language or 'not declared'} · Word count: ~{signals.word_count} · "
                f"Sections (H2s): {len(signals.h2)}"),
    ))

    return PillarResult.build(
        key="geoReadiness",
        label="GEO Readiness",
        description="Will AI systems cite you? Entity schema, NAP & authority",
        points=points,
        max_points=MAX_POINTS,
        checks=checks,
    )
