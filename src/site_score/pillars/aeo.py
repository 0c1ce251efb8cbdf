"""AEO readiness: can this page surface as a direct answer?"""

from ..models import Check, PageSignals, PillarResult

MAX_POINTS = 15
ANSWER_SCHEMA_POINTS = 5
LIST_POINTS = 3
SUPPORT_POINTS = 3


def _question_points(count: int) -> int:
    if count >= 4:
        return 4
    elif count >= 2:
        return 3
    elif count == 1:
        return 1
    return 0


def score_aeo_readiness(signals: PageSignals) -> PillarResult:
    """Score featured-snippet, People Also Ask and voice answer signals.

    Key factors:
    - FAQPage and HowTo schema
    - H2s phrased as questions
    - ordered and unordered lists
    - Article, BreadcrumbList and WebSite schema
    """
    checks: list[Check] = []
    points = 0

    # Answer-trigger schema
    points += min(4 * int(signals.has_faq_schema) + 2 * int(signals.has_howto_schema), ANSWER_SCHEMA_POINTS)
    checks.append(Check(
        label="FAQPage schema",
        passed=signals.has_faq_schema,
        detail="FAQPage schema present ✓. Surfaces as accordion answers and AI citation sources"
        if signals.has_faq_schema
        else "Missing. Mark up Q&A pairs with FAQPage schema, the highest-impact AEO change",
    ))
    checks.append(Check(
        label="HowTo schema",
        passed=signals.has_howto_schema,
        detail="HowTo schema present ✓. Triggers step-by-step rich results"
        if signals.has_howto_schema
        else "Missing. Mark up any process explanation with HowTo schema",
    ))

    # Question headings
    questions = signals.question_h2_count
    points += _question_points(questions)
    detail = f"{questions} question-based H2s found (How/What/Why/Where/When/Can)."
    if questions >= 2:
        detail += " ✓ These attract featured snippets and PAA boxes"
    else:
        detail += " Phrase H2s as the questions your customers search"
    checks.append(Check(label="Question-style headings", passed=questions >= 2, detail=detail))

    # Lists
    points += min(2 * int(signals.has_ordered_lists) + 2 * int(signals.has_unordered_lists), LIST_POINTS)
    found = []
    if signals.has_ordered_lists:
        found.append("Numbered lists ✓")
    if signals.has_unordered_lists:
        found.append("Bullet lists ✓")
    checks.append(Check(
        label="List & structured answers (UL/OL)",
        passed=bool(found),
        detail=" · ".join(found) or "No lists found. Many featured snippets are extracted from lists",
    ))

    # Supporting schema
    support = [
        name for name, hit in (
            ("Article", signals.has_article_schema),
            ("Breadcrumb", signals.has_breadcrumb_schema),
            ("WebSite", signals.has_website_schema),
        ) if hit
    ]
    points += min(len(support), SUPPORT_POINTS)
    if len(support) >= 2:
        support_detail = f"{', '.join(support)} ✓"
    elif support:
        support_detail = "One of three present. Add Article and BreadcrumbList schema for full coverage"
    else:
        support_detail = "None found. Article and Breadcrumb schema help AI understand content structure"
    checks.append(Check(
        label="Supporting schema (Article, Breadcrumb)",
        passed=bool(support),
        detail=support_detail,
    ))

    return PillarResult.build(
        key="aeoReadiness",
        label="AEO Readiness",
        description="Featured snippets, PAA boxes & voice search answers",
        points=points,
        max_points=MAX_POINTS,
        checks=checks,
    )
