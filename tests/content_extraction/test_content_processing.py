import pytest

from src.functions.content_extraction.core.processors.content_cleaner import (
    clean_text,
    filter_paragraphs,
    is_boilerplate,
    resegment,
)
from src.functions.content_extraction.core.processors.metadata_extractor import extract_metadata
from src.functions.content_extraction.core.processors.quality import (
    ContentQuality,
    score_content,
    score_readability,
)
from src.functions.content_extraction.core.contracts import PageDocument
from tests.content_extraction.pages import ARTICLE_BODY, ARTICLE_PAGE


def test_clean_text_collapses_layout_whitespace():
    text = "  First\tline  here \n\n\n   Second   paragraph  "

    assert clean_text(text) == "First line here\n\nSecond paragraph"


@pytest.mark.parametrize(
    "text",
    [
        "© 2026 Saudi Gazette. All rights reserved.",
        "Follow us on social media for updates",
        "Click here to continue",
        "اشترك في النشرة البريدية",
        "جميع الحقوق محفوظة",
        "اقرأ أيضا: أخبار اليوم",
    ],
)
def test_boilerplate_is_detected_in_both_languages(text):
    assert is_boilerplate(text)


def test_news_sentences_are_not_boilerplate():
    assert not is_boilerplate("The council approved the budget after a lengthy debate on Monday.")


def test_filter_paragraphs_drops_fragments_and_notices():
    paragraphs = [
        "Photo: SPA",
        "Sign up for our morning briefing and never miss a story again.",
        "The council approved the budget after a lengthy debate on Monday.",
    ]

    assert filter_paragraphs(paragraphs) == ["The council approved the budget after a lengthy debate on Monday."]


def test_resegment_groups_sentences():
    chunks = resegment(ARTICLE_BODY)

    assert len(chunks) == 3
    assert all(len(chunk) >= 40 for chunk in chunks)
    assert " ".join(chunks) == ARTICLE_BODY


def test_resegment_ignores_short_text():
    assert resegment("Too short to split. Really.") == []


def test_resegment_splits_on_arabic_comma():
    sentence = "أعلنت الوزارة اليوم عن خطة جديدة لدعم المشاريع الصغيرة في جميع مناطق المملكة،"
    chunks = resegment(" ".join([sentence] * 6))

    assert len(chunks) >= 2


def test_score_content_full_marks():
    quality = ContentQuality(
        paragraph_count=6,
        avg_paragraph_length=250.0,
        total_length=1500,
        has_proper_structure=True,
    )

    assert score_content(quality) == 1.0


def test_score_content_tiers():
    quality = ContentQuality(
        paragraph_count=3,
        avg_paragraph_length=60.0,
        total_length=800,
        has_proper_structure=False,
    )

    assert score_content(quality) == pytest.approx(0.55)


def test_score_content_for_sparse_text():
    quality = ContentQuality.measure(["one short line"], has_proper_structure=False)

    assert score_content(quality) == 0.0


def test_content_quality_measure():
    quality = ContentQuality.measure(["a" * 100, "b" * 100], has_proper_structure=True)

    assert quality.paragraph_count == 2
    assert quality.total_length == 202
    assert quality.avg_paragraph_length == pytest.approx(101.0)


def test_score_readability_uses_metadata():
    text = "x" * 2000

    assert score_readability(text, paragraph_count=1) == pytest.approx(0.75)
    assert score_readability(
        text,
        paragraph_count=4,
        excerpt="e" * 60,
        byline="Staff Reporter",
        site_name="Saudi Gazette",
    ) == 1.0


def test_extract_metadata_reads_meta_tags():
    metadata = extract_metadata(PageDocument.parse("https://example.com", ARTICLE_PAGE).soup)

    assert metadata.site_name == "Saudi Gazette"
    assert metadata.byline == "Staff Reporter"
    assert metadata.excerpt.startswith("The Riyadh metro")
