from conftest import SAMPLE_HTML

from site_score.models import PageSignals
from site_score.signals import BODY_TEXT_LIMIT, extract_signals


def test_extracts_meta_fields():
    signals = extract_signals(SAMPLE_HTML, "https://acme.example/")

    assert signals.title == "Acme Plumbing Services | Emergency Plumbers in Springfield"
    assert signals.title_length == len(signals.title)
    assert signals.meta_description.startswith("Acme Plumbing offers 24/7")
    assert signals.canonical_url == "https://acme.example/"
    assert signals.language == "en"
    assert signals.has_viewport is True
    assert signals.robots_meta is None
    assert signals.fetch_error is False


def test_headings_are_flattened_and_questions_counted():
    signals = extract_signals(SAMPLE_HTML, "https://acme.example/")

    assert signals.h1 == ["Emergency Plumbing in Springfield"]
    assert len(signals.h2) == 3
    assert signals.h3 == []
    assert signals.question_h2_count == 2
    assert signals.has_ordered_lists is True
    assert signals.has_unordered_lists is True


def test_images_links_and_contact_signals():
    signals = extract_signals(SAMPLE_HTML, "https://acme.example/")

    assert signals.total_images == 3
    assert signals.images_with_alt == 1
    # canonical link, /contact and the absolute same-origin link
    assert signals.internal_links == 3
    assert signals.external_links == 1
    assert signals.has_phone is True
    assert signals.has_email is True
    assert signals.has_address is True
    assert signals.has_social_links is True


def test_body_text_drops_scripts_and_styles():
    signals = extract_signals(SAMPLE_HTML, "https://acme.example/")

    assert "scriptword" not in signals.body_text
    assert "color" not in signals.body_text
    assert "Call us on" in signals.body_text
    assert signals.word_count > 20


def test_body_text_is_capped():
    html = "<html><body><p>" + "word " * 3000 + "</p></body></html>"
    signals = extract_signals(html, "https://example.com/")

    assert signals.word_count == 3000
    assert len(signals.body_text) == BODY_TEXT_LIMIT


def test_open_graph_and_schema_types():
    signals = extract_signals(SAMPLE_HTML, "https://acme.example/")

    assert signals.og_title == "Acme Plumbing"
    assert signals.og_image == "https://acme.example/og.png"
    assert signals.og_type is None
    assert signals.schema_types == ["Organization", "FAQPage", "WebSite", "BreadcrumbList"]
    assert signals.has_org_schema is True
    assert signals.has_faq_schema is True
    assert signals.has_website_schema is True
    assert signals.has_breadcrumb_schema is True
    assert signals.has_howto_schema is False
    assert signals.has_article_schema is False


def test_malformed_json_ld_does_not_stop_later_blocks():
    html = """<html><head>
    <script type="application/ld+json">{"@type": "Organization",</script>
    <script type="application/ld+json">{"@type": "HowTo"}</script>
    <title>Still parsed</title>
    </head><body><h1>Heading</h1></body></html>"""
    signals = extract_signals(html, "https://example.com/")

    assert signals.schema_types == ["HowTo"]
    assert signals.has_howto_schema is True
    assert signals.has_org_schema is False
    assert signals.title == "Still parsed"
    assert signals.h1 == ["Heading"]


def test_graph_and_local_business_suffixes():
    html = """<html><head><script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
        {"@type": "HardwareStore"}, {"@type": "BlogPosting"}, {"@type": 42}
    ]}
    </script></head><body></body></html>"""
    signals = extract_signals(html, "https://example.com/")

    assert signals.schema_types == ["HardwareStore", "BlogPosting"]
    assert signals.has_local_business_schema is True
    assert signals.has_article_schema is True


def test_meta_attribute_order_does_not_matter():
    html = """<html><head>
    <meta content="Reversed order description" name="description">
    <meta content="noindex, follow" name="robots">
    </head><body></body></html>"""
    signals = extract_signals(html, "https://example.com/")

    assert signals.meta_description == "Reversed order description"
    assert signals.robots_meta == "noindex, follow"


def test_page_without_anything_is_fully_populated():
    signals = extract_signals("", "https://example.com/")

    assert signals.title is None
    assert signals.h1 == []
    assert signals.total_images == 0
    assert signals.alt_coverage == 1.0
    assert signals.word_count == 0
    assert signals.schema_types == []
    assert signals.fetch_error is False


def test_empty_record_marks_fetch_error():
    signals = PageSignals.empty()

    assert signals.fetch_error is True
    assert signals.title is None
    assert signals.meta_description_length == 0
    assert signals.open_graph == {}
    assert signals.question_h2_count == 0
