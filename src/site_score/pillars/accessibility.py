"""Accessibility & best-practices pillar."""

from ..models import Check, PillarResult, clamp, round_half_up

MAX_POINTS = 8
ACCESSIBILITY_POINTS = 5
BEST_PRACTICES_POINTS = 3


def score_accessibility(accessibility: float, best_practices: float) -> PillarResult:
    points = (
        round_half_up(clamp(accessibility) * ACCESSIBILITY_POINTS)
        + round_half_up(clamp(best_practices) * BEST_PRACTICES_POINTS)
    )
    checks = [
        Check(
            label="Accessibility (Lighthouse)",
            passed=accessibility >= 0.7,
            detail=f"{round_half_up(accessibility * 100)}/100. Covers alt text, colour contrast, "
                   "aria labels and keyboard navigation",
        ),
        Check(
            label="Best practices (Lighthouse)",
            passed=best_practices >= 0.8,
            detail=f"{round_half_up(best_practices * 100)}/100. Covers security headers, "
                   "JS errors and deprecated APIs",
        ),
    ]
    return PillarResult.build(
        key="accessibility",
        label="Accessibility & Tech",
        description="WCAG compliance & modern web standards",
        points=points,
        max_points=MAX_POINTS,
        checks=checks,
    )
