"""Performance pillar from the Lighthouse performance score."""

from ..models import Check, PillarResult, clamp, round_half_up

MAX_POINTS = 12


def _tier(perf: float) -> str:
    if perf >= 0.9:
        return "Excellent"
    elif perf >= 0.7:
        return "Good"
    elif perf >= 0.5:
        return "Needs improvement"
    else:
        return "Poor"


def score_performance(perf: float) -> PillarResult:
    """Scale the mobile Lighthouse performance score (0-1) into pillar points."""
    lighthouse = round_half_up(perf * 100)

    if perf >= 0.9:
        vitals = "All green"
    elif perf >= 0.75:
        vitals = "Most passing"
    else:
        vitals = "Several failing, which impacts rankings"

    checks = [
        Check(
            label="Performance score",
            passed=perf >= 0.7,
            detail=f"{lighthouse}/100 ({_tier(perf)})",
        ),
        Check(label="Core Web Vitals tier", passed=perf >= 0.75, detail=vitals),
        Check(
            label="Mobile-optimised speed",
            passed=perf >= 0.6,
            detail="Acceptable for mobile" if perf >= 0.6
            else "Slow on mobile. 53% of users bounce after 3s",
        ),
    ]

    return PillarResult.build(
        key="performance",
        label="Performance",
        description="Page load speed & Core Web Vitals on mobile",
        points=round_half_up(clamp(perf) * MAX_POINTS),
        max_points=MAX_POINTS,
        checks=checks,
    )
