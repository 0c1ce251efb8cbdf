import httpx
import pytest
from conftest import psi_payload

from site_score.errors import (
    RateLimitedError,
    UnusableResultError,
    UpstreamError,
    UpstreamTimeoutError,
)
from site_score.pagespeed import CATEGORIES, build_params, parse_response


def test_build_params_requests_mobile_and_all_categories():
    params = build_params("https://acme.example/", api_key="secret")

    assert ("url", "https://acme.example/") in params
    assert ("strategy", "mobile") in params
    assert ("key", "secret") in params
    assert [v for k, v in params if k == "category"] == list(CATEGORIES)


def test_build_params_without_key():
    params = build_params("https://acme.example/")

    assert all(k != "key" for k, _ in params)


def test_parse_scores():
    report = parse_response(httpx.Response(200, json=psi_payload(0.9, 0.8, 0.7, 0.6)))

    assert report.performance == 0.9
    assert report.seo == 0.8
    assert report.accessibility == 0.7
    assert report.best_practices == 0.6
    assert report.canonical_audit_passed is True


def test_missing_categories_default_to_zero():
    body = {"lighthouseResult": {"categories": {"performance": {"score": None}}}}
    report = parse_response(httpx.Response(200, json=body))

    assert report.performance == 0.0
    assert report.seo == 0.0
    assert report.canonical_audit_passed is False


def test_transport_failure_is_a_timeout():
    request = httpx.Request("GET", "https://www.googleapis.com/")

    with pytest.raises(UpstreamTimeoutError) as exc:
        parse_response(httpx.ReadTimeout("slow", request=request))

    assert exc.value.status_code == 504


def test_rate_limit_status_and_body():
    with pytest.raises(RateLimitedError):
        parse_response(httpx.Response(429, json={"error": {"code": 429}}))

    with pytest.raises(RateLimitedError) as exc:
        parse_response(httpx.Response(200, json={"error": {"code": 429, "message": "Quota"}}))

    assert exc.value.status_code == 429


def test_no_lighthouse_result_is_unusable():
    with pytest.raises(UnusableResultError) as exc:
        parse_response(httpx.Response(400, json={"error": {"code": 400, "message": "FAILED_DOCUMENT_REQUEST"}}))

    assert exc.value.status_code == 400
    assert exc.value.message


def test_server_error_and_garbage_are_upstream_errors():
    with pytest.raises(UpstreamError):
        parse_response(httpx.Response(500, json={"error": {"code": 500}}))

    with pytest.raises(UpstreamError) as exc:
        parse_response(httpx.Response(200, text="<html>maintenance</html>"))

    assert exc.value.status_code == 502
