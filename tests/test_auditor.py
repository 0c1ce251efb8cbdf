import asyncio
import json

import httpx
import pytest
from conftest import PSI_HOST, SAMPLE_HTML, make_transport, psi_payload

from site_score.auditor import fetch_text, normalize_url, run_audit, validate_url
from site_score.errors import InvalidURLError, RateLimitedError, UpstreamTimeoutError


def _audit(url, settings, **transport_kwargs):
    calls = transport_kwargs.setdefault("calls", [])
    transport = make_transport(**transport_kwargs)
    return asyncio.run(run_audit(url, settings=settings, transport=transport)), calls


def test_normalize_url_defaults_to_https():
    assert normalize_url("acme.example") == "https://acme.example"
    assert normalize_url("  acme.example/path ") == "https://acme.example/path"
    assert normalize_url("http://acme.example") == "http://acme.example"
    assert normalize_url("https://acme.example") == "https://acme.example"
    assert normalize_url("HTTP://acme.example/") == "http://acme.example/"
    assert normalize_url("Https://Acme.example/Path") == "https://Acme.example/Path"


def test_validate_url_returns_origin():
    assert validate_url("https://acme.example/some/page?q=1") == "https://acme.example"
    assert validate_url("http://localhost:8080/") == "http://localhost:8080"
    assert validate_url("https://127.0.0.1/") == "https://127.0.0.1"
    assert validate_url("https://my_app.example.com/") == "https://my_app.example.com"


@pytest.mark.parametrize("url", [
    "https://not a url",
    "https://",
    "https://-bad-.example",
    "https://acme..example",
    "https://acme.example:99999/",
    "ftp://acme.example/",
])
def test_validate_url_rejects(url):
    with pytest.raises(InvalidURLError):
        validate_url(url)


@pytest.mark.parametrize("raw", [None, "", "   ", 42, "not a url"])
def test_bad_input_makes_no_requests(raw, settings):
    calls = []
    transport = make_transport(calls=calls)

    with pytest.raises(InvalidURLError) as exc:
        asyncio.run(run_audit(raw, settings=settings, transport=transport))

    assert exc.value.status_code == 400
    assert exc.value.message
    assert calls == []


def test_full_audit(settings):
    result, calls = _audit("acme.example", settings)

    assert result.url == "https://acme.example"
    assert result.score == sum(p.points for p in result.pillars)
    assert [p.key for p in result.pillars] == [
        "performance", "technicalSeo", "contentKeywords", "geoReadiness", "aeoReadiness", "accessibility",
    ]
    for pillar in result.pillars:
        assert 0 <= pillar.points <= pillar.max_points

    health = result.health
    assert health.domain == "acme.example"
    assert health.is_https is True
    assert health.has_robots is True
    assert health.has_sitemap is True
    assert health.page_count == 2
    assert health.html_fetch_error is False
    assert health.schema_types_found == ["Organization", "FAQPage", "WebSite", "BreadcrumbList"]
    assert health.total_issues >= len(result.recommendations)

    site_paths = [r.url.path for r in calls if r.url.host == "acme.example"]
    assert len(site_paths) == 3
    assert {"/robots.txt", "/sitemap.xml"} <= set(site_paths)


def test_pagespeed_request_parameters(settings):
    keyed = settings.model_copy(update={"pagespeed_api_key": "secret"})
    _, calls = _audit("https://acme.example/", keyed)

    psi = next(r for r in calls if r.url.host == PSI_HOST)
    assert psi.url.params["url"] == "https://acme.example/"
    assert psi.url.params["strategy"] == "mobile"
    assert psi.url.params["key"] == "secret"
    assert psi.url.params.get_list("category") == ["performance", "seo", "accessibility", "best-practices"]


def test_missing_robots_and_sitemap_still_succeeds(settings):
    result, _ = _audit("https://acme.example/", settings, robots=httpx.ConnectError, sitemap=None)

    assert result.health.has_robots is False
    assert result.health.has_sitemap is False
    assert result.health.page_count is None
    assert result.health.blocked_by_crawlers is False
    assert "sitemap" in [r.id for r in result.recommendations]


def test_unreachable_page_degrades_to_empty_signals(settings):
    result, _ = _audit("https://acme.example/", settings, html=httpx.ReadTimeout)

    assert result.health.html_fetch_error is True
    assert result.health.schema_types_found == []
    assert result.keywords == []
    assert result.pillar("contentKeywords").points == 0


def test_error_page_counts_as_unreachable(settings):
    result, _ = _audit("https://acme.example/", settings, html=httpx.Response(503, text="<h1>Down</h1>"))

    assert result.health.html_fetch_error is True


def test_pagespeed_timeout_is_fatal(settings):
    with pytest.raises(UpstreamTimeoutError) as exc:
        _audit("https://acme.example/", settings, psi=httpx.ReadTimeout)

    assert exc.value.status_code == 504


def test_pagespeed_rate_limit_is_passed_through(settings):
    with pytest.raises(RateLimitedError):
        _audit("https://acme.example/", settings, psi=httpx.Response(429, json={"error": {"code": 429}}))


def test_fixed_lighthouse_scores(settings):
    psi = httpx.Response(200, json=psi_payload(performance=0.9, seo=0.8, accessibility=0.7, best_practices=0.9))
    result, _ = _audit("https://acme.example/", settings, psi=psi)

    assert result.pillar("performance").points == 11
    assert result.pillar("accessibility").points == 4 + 3
    assert result.score == sum(p.points for p in result.pillars)
    assert result.score <= 100


def test_output_is_deterministic(settings):
    first, _ = _audit("https://acme.example/", settings)
    second, _ = _audit("https://acme.example/", settings)

    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


def test_recommendations_are_truncated_and_gated(settings):
    bare = "<html><body><p>nothing here</p></body></html>"
    psi = httpx.Response(200, json=psi_payload(performance=0.3, seo=0.3, accessibility=0.3))
    result, _ = _audit("http://acme.example/", settings, psi=psi, html=bare, robots=None, sitemap=None)

    assert len(result.recommendations) == settings.recommendations_display_limit
    assert result.health.total_issues > settings.recommendations_display_limit
    assert result.gated_count == result.health.total_issues - settings.free_recommendations
    assert result.recommendations[0].priority.value == "critical"


def test_uppercase_scheme_audits_the_right_origin(settings):
    result, calls = _audit("HTTP://acme.example/", settings)

    assert result.url == "http://acme.example/"
    assert result.health.domain == "acme.example"
    assert result.health.is_https is False
    assert {r.url.host for r in calls} == {PSI_HOST, "acme.example"}


def test_overall_timeout_is_504(settings):
    async def slow(request):
        await asyncio.sleep(2)
        return httpx.Response(200, text=SAMPLE_HTML)

    impatient = settings.model_copy(update={"audit_timeout": 0.2})

    with pytest.raises(UpstreamTimeoutError) as exc:
        asyncio.run(run_audit("https://acme.example/", settings=impatient, transport=httpx.MockTransport(slow)))

    assert exc.value.status_code == 504


def _fetch(response, max_bytes=1000):
    async def go():
        transport = httpx.MockTransport(lambda request: response)
        async with httpx.AsyncClient(transport=transport) as client:
            return await fetch_text(client, "https://acme.example/", timeout=5, max_bytes=max_bytes)

    return asyncio.run(go())


def test_fetch_text_caps_the_body():
    assert _fetch(httpx.Response(200, text="a" * 5000)) == "a" * 1000
    assert _fetch(httpx.Response(200, text="short")) == "short"


def test_fetch_text_treats_errors_and_blank_bodies_as_absent():
    assert _fetch(httpx.Response(404, text="not found")) is None
    assert _fetch(httpx.Response(200, text="  \n ")) is None
