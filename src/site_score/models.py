"""Data models for site audit results."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` would bank it)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class PageSignals:
    """Facts pulled out of a page's HTML.

    Every field has an empty default so a record built from an unreachable
    page is still complete.
    """
    # Meta
    title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    language: Optional[str] = None
    has_viewport: bool = False
    robots_meta: Optional[str] = None
    # Headings
    h1: list[str] = field(default_factory=list)
    h2: list[str] = field(default_factory=list)
    h3: list[str] = field(default_factory=list)
    # Images
    total_images: int = 0
    images_with_alt: int = 0
    # Links
    internal_links: int = 0
    external_links: int = 0
    # Content
    word_count: int = 0
    body_text: str = ""
    # Social
    open_graph: dict[str, str] = field(default_factory=dict)
    twitter_card: Optional[str] = None
    # Schema.org
    schema_types: list[str] = field(default_factory=list)
    has_faq_schema: bool = False
    has_howto_schema: bool = False
    has_org_schema: bool = False
    has_local_business_schema: bool = False
    has_article_schema: bool = False
    has_breadcrumb_schema: bool = False
    has_website_schema: bool = False
    # Answer-engine
    question_h2_count: int = 0
    has_ordered_lists: bool = False
    has_unordered_lists: bool = False
    # Entity
    has_phone: bool = False
    has_email: bool = False
    has_address: bool = False
    has_social_links: bool = False
    # Technical
    has_hreflang: bool = False
    fetch_error: bool = False

    @classmethod
    def empty(cls, fetch_error: bool = True) -> "PageSignals":
        return cls(fetch_error=fetch_error)

    @property
    def title_length(self) -> int:
        return len(self.title) if self.title else 0

    @property
    def meta_description_length(self) -> int:
        return len(self.meta_description) if self.meta_description else 0

    @property
    def alt_coverage(self) -> float:
        """Share of images with alt text; 1.0 when the page has none."""
        if self.total_images == 0:
            return 1.0
        return self.images_with_alt / self.total_images

    @property
    def og_title(self) -> Optional[str]:
        return self.open_graph.get("title")

    @property
    def og_description(self) -> Optional[str]:
        return self.open_graph.get("description")

    @property
    def og_image(self) -> Optional[str]:
        return self.open_graph.get("image")

    @property
    def og_type(self) -> Optional[str]:
        return self.open_graph.get("type")

    @property
    def distinct_schema_types(self) -> list[str]:
        return list(dict.fromkeys(self.schema_types))


@dataclass(frozen=True)
class SiteInfo:
    """Crawl infrastructure found at the site root."""
    has_robots: bool = False
    has_sitemap: bool = False
    blocked_by_crawlers: bool = False
    sitemap_url: Optional[str] = None
    page_count: Optional[int] = None


@dataclass(frozen=True)
class LighthouseReport:
    """Category scores (0-1) from a PageSpeed run."""
    performance: float = 0.0
    seo: float = 0.0
    accessibility: float = 0.0
    best_practices: float = 0.0
    canonical_audit_passed: bool = False


@dataclass(frozen=True)
class Keyword:
    """A candidate keyword and where it shows up."""
    word: str
    count: int
    in_title: bool = False
    in_h1: bool = False
    in_meta_description: bool = False
    in_url: bool = False

    @property
    def zone_flags(self) -> list[bool]:
        return [self.in_title, self.in_h1, self.in_meta_description, self.in_url]

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "count": self.count,
            "inTitle": self.in_title,
            "inH1": self.in_h1,
            "inMetaDesc": self.in_meta_description,
            "inURL": self.in_url,
        }


@dataclass(frozen=True)
class Check:
    """A single pass/fail line inside a pillar."""
    label: str
    passed: bool
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "passed": self.passed, "detail": self.detail}


@dataclass(frozen=True)
class PillarResult:
    """Score of one pillar."""
    key: str
    label: str
    description: str
    score: int  # 0-100
    points: int
    max_points: int
    checks: list[Check] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        key: str,
        label: str,
        description: str,
        points: int,
        max_points: int,
        checks: list[Check],
    ) -> "PillarResult":
        """Clamp points to the pillar budget and normalise to 0-100."""
        points = max(0, min(points, max_points))
        return cls(
            key=key,
            label=label,
            description=description,
            score=round_half_up(points / max_points * 100),
            points=points,
            max_points=max_points,
            checks=checks,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "score": self.score,
            "points": self.points,
            "maxPoints": self.max_points,
            "checks": [c.to_dict() for c in self.checks],
        }


class Priority(Enum):
    """Recommendation priority, in display order."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.CRITICAL: 0, Priority.HIGH: 1, Priority.MEDIUM: 2}


@dataclass(frozen=True)
class Recommendation:
    """An issue found on the page and how to fix it."""
    id: str
    priority: Priority
    category: str
    title: str
    description: str
    fix: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category,
            "fix": self.fix,
        }


@dataclass(frozen=True)
class HealthSummary:
    """Site-level facts shown above the pillars."""
    domain: str
    is_https: bool
    page_count: Optional[int]
    has_robots: bool
    has_sitemap: bool
    blocked_by_crawlers: bool
    critical_issues: int
    high_issues: int
    total_issues: int
    schema_types_found: list[str] = field(default_factory=list)
    html_fetch_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "isHTTPS": self.is_https,
            "pageCount": self.page_count,
            "hasRobots": self.has_robots,
            "hasSitemap": self.has_sitemap,
            "blockedByCrawlers": self.blocked_by_crawlers,
            "criticalIssues": self.critical_issues,
            "highIssues": self.high_issues,
            "totalIssues": self.total_issues,
            "schemaTypesFound": list(self.schema_types_found),
            "htmlFetchError": self.html_fetch_error,
        }


@dataclass(frozen=True)
class AuditResult:
    """Complete audit result for a URL."""
    url: str
    pillars: list[PillarResult]
    keywords: list[Keyword]
    keyword_coverage: int
    recommendations: list[Recommendation]
    gated_count: int
    health: HealthSummary

    @property
    def score(self) -> int:
        return sum(p.points for p in self.pillars)

    def pillar(self, key: str) -> PillarResult:
        for p in self.pillars:
            if p.key == key:
                return p
        raise KeyError(key)

    def to_dict(self) -> dict[str, Any]:
        """JSON body returned by the audit endpoint."""
        return {
            "score": self.score,
            "url": self.url,
            "health": self.health.to_dict(),
            "pillars": {p.key: p.to_dict() for p in self.pillars},
            "keywords": {
                "top": [k.to_dict() for k in self.keywords],
                "coverageScore": self.keyword_coverage,
            },
            "recommendations": [r.to_dict() for r in self.recommendations],
            "gatedRecsCount": self.gated_count,
        }
