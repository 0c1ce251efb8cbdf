"""Scoring pillars that make up the audit score."""

from .performance import score_performance
from .technical_seo import score_technical_seo
from .content import score_content_keywords
from .geo import score_geo_readiness
from .aeo import score_aeo_readiness
from .accessibility import score_accessibility

__all__ = [
    "score_performance",
    "score_technical_seo",
    "score_content_keywords",
    "score_geo_readiness",
    "score_aeo_readiness",
    "score_accessibility",
]
