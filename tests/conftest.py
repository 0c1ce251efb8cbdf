import httpx
import pytest

from site_score.config import Settings

PSI_HOST = "www.googleapis.com"

SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<title>Acme Plumbing Services | Emergency Plumbers in Springfield</title>
<meta name="description" content="Acme Plumbing offers 24/7 emergency plumbing in Springfield: leak repair, boiler servicing and drain unblocking from certified local plumbers.">
<meta name="viewport" content="width=device-width, initial-scale=1">
<link rel="canonical" href="https://acme.example/">
<meta property="og:title" content="Acme Plumbing">
<meta property="og:description" content="Emergency plumbing in Springfield">
<meta property="og:image" content="https://acme.example/og.png">
<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Acme"}</script>
<script type="application/ld+json">{ not valid json </script>
<script type="application/ld+json">[{"@type": "FAQPage"}, {"@type": ["WebSite", "BreadcrumbList"]}]</script>
</head>
<body>
<h1>Emergency <span>Plumbing</span> in Springfield</h1>
<h2>How do I fix a leaking tap?</h2>
<h2>What does an emergency call-out cost?</h2>
<h2>Our services</h2>
<ul><li>Leaks</li><li>Boilers</li></ul>
<ol><li>Call</li><li>We arrive</li></ol>
<img src="/a.png" alt="Plumber at work"><img src="/b.png" alt=""><img src="/c.png">
<a href="/contact">Contact</a>
<a href="https://acme.example/about">About</a>
<a href="https://twitter.com/acme">Twitter</a>
<a href="#top">Top</a>
<p>Call us on +1 (555) 123-4567 or email hello@acme.example. Visit 12 Main Street, Springfield.</p>
<script>var ignored = "scriptword";</script>
<style>.x { color: red }</style>
</body>
</html>
"""

ROBOTS_TXT = """User-agent: *
Disallow: /admin
Sitemap: https://acme.example/sitemap_index.xml
"""

SITEMAP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://acme.example/</loc></url>
  <url><loc>https://acme.example/about</loc></url>
</urlset>
"""


def psi_payload(performance=0.9, seo=0.8, accessibility=0.7, best_practices=0.9, canonical=1):
    return {
        "lighthouseResult": {
            "categories": {
                "performance": {"score": performance},
                "seo": {"score": seo},
                "accessibility": {"score": accessibility},
                "best-practices": {"score": best_practices},
            },
            "audits": {"canonical": {"score": canonical}},
        }
    }


def make_transport(psi=None, html=SAMPLE_HTML, robots=ROBOTS_TXT, sitemap=SITEMAP_XML, calls=None):
    """MockTransport serving PageSpeed plus the audited site.

    Each source may be a str body, an ``httpx.Response``, an exception class
    to raise, or None for a 404.
    """
    psi = httpx.Response(200, json=psi_payload()) if psi is None else psi

    def respond(source, request):
        if isinstance(source, type) and issubclass(source, Exception):
            raise source("mocked failure", request=request)
        if isinstance(source, httpx.Response):
            return source
        if source is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=source)

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.url.host == PSI_HOST:
            return respond(psi, request)
        if request.url.path == "/robots.txt":
            return respond(robots, request)
        if request.url.path == "/sitemap.xml":
            return respond(sitemap, request)
        return respond(html, request)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings():
    return Settings(_env_file=None, pagespeed_api_key=None)
