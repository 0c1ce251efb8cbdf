"""site-score - PageSpeed, SEO, GEO and AEO audit score for a single URL."""

__version__ = "0.1.0"
