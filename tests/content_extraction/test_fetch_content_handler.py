import asyncio
import json
from types import SimpleNamespace

import flask
import httpx

from src.functions.content_extraction.core.content_extractor import ContentExtractor
from src.functions.content_extraction.core.contracts import ExtractionResult
from src.functions.content_extraction.core.db.story_content import StoryContentStore
from src.functions.content_extraction.core.fetcher import PageFetcher
from src.functions.content_extraction.core.pipelines.backfill import ContentBackfillPipeline, clamp_backfill_limit
from src.functions.content_extraction.functions.main import backfill_content_handler, fetch_content_handler
from tests.content_extraction.pages import ARTICLE_PAGE

app = flask.Flask(__name__)

CONTENT = "Officials confirmed the new metro line will open next month. " * 5


class FakeExtractor:
    def __init__(self, result=None, error=None, by_url=None):
        self.result = result
        self.error = error
        self.by_url = by_url or {}
        self.urls = []

    async def extract(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.by_url.get(url, self.result)


class FakeContentStore:
    def __init__(self, stories=(), fail_saves=False):
        self.stories = list(stories)
        self.fail_saves = fail_saves
        self.saved = {}
        self.limits = []

    def save_content(self, story_id, content, quality):
        if self.fail_saves:
            return False
        self.saved[story_id] = (content, quality)
        return True

    def fetch_missing_content(self, limit):
        self.limits.append(limit)
        return self.stories[:limit]


def _post(handler, payload, method="POST", **kwargs):
    with app.test_request_context("/", method=method, json=payload):
        response = handler(flask.request, **kwargs)
    body = response.get_data(as_text=True)
    return response.status_code, json.loads(body) if body else None


def test_successful_extraction_is_returned_and_cached():
    extractor = FakeExtractor(ExtractionResult(content=CONTENT, quality=0.8567, method="json-ld"))
    store = FakeContentStore()

    status, body = _post(
        fetch_content_handler,
        {"story_id": "story-1", "url": "https://example.com/a"},
        extractor=extractor,
        store=store,
    )

    assert status == 200
    assert body == {
        "success": True,
        "content": CONTENT,
        "quality": 0.857,
        "method": "json-ld",
        "length": len(CONTENT),
    }
    assert store.saved["story-1"][0] == CONTENT
    assert extractor.urls == ["https://example.com/a"]


def test_no_content_returns_soft_failure():
    store = FakeContentStore()

    status, body = _post(
        fetch_content_handler,
        {"story_id": "story-1", "url": "https://example.com/a"},
        extractor=FakeExtractor(ExtractionResult.empty("not_found")),
        store=store,
    )

    assert status == 200
    assert body == {
        "success": False,
        "content": None,
        "method": "not_found",
        "error": "Could not extract content from this article",
    }
    assert store.saved == {}


def test_warmup_ping_skips_extraction():
    extractor = FakeExtractor()

    status, body = _post(fetch_content_handler, {"story_id": "warmup-ping"}, extractor=extractor, store=FakeContentStore())

    assert status == 200
    assert body == {"success": True, "warmup": True}
    assert extractor.urls == []


def test_missing_fields_are_rejected():
    status, body = _post(
        fetch_content_handler,
        {"story_id": "story-1"},
        extractor=FakeExtractor(),
        store=FakeContentStore(),
    )

    assert status == 400
    assert body == {"success": False, "error": "story_id and url are required"}


def test_unexpected_failure_returns_500():
    status, body = _post(
        fetch_content_handler,
        {"story_id": "story-1", "url": "https://example.com/a"},
        extractor=FakeExtractor(error=RuntimeError("boom")),
        store=FakeContentStore(),
    )

    assert status == 500
    assert body == {"success": False, "error": "boom"}


def test_get_is_not_allowed():
    status, body = _post(fetch_content_handler, None, method="GET", extractor=FakeExtractor(), store=FakeContentStore())

    assert status == 405
    assert body["success"] is False


def test_backfill_limit_is_clamped():
    assert clamp_backfill_limit(None) == 20
    assert clamp_backfill_limit("7") == 7
    assert clamp_backfill_limit(500) == 50
    assert clamp_backfill_limit(0) == 1


def test_backfill_counts_found_and_missing_content():
    stories = [
        {"id": "s1", "original_url": "https://example.com/1", "title_en": "First story"},
        {"id": "s2", "original_url": "https://example.com/2", "title_ar": "القصة الثانية"},
    ]
    extractor = FakeExtractor(
        ExtractionResult.empty("http_error", "HTTP 404"),
        by_url={"https://example.com/1": ExtractionResult(content=CONTENT, quality=0.7, method="dom")},
    )
    store = FakeContentStore(stories)

    report = asyncio.run(ContentBackfillPipeline(store, extractor, delay_seconds=0).run(10))

    assert report["summary"] == {"total_processed": 2, "content_found": 1, "content_not_found": 1}
    assert report["results"][0]["success"] is True
    assert report["results"][1] == {
        "id": "s2",
        "title": "القصة الثانية",
        "method": "http_error",
        "length": 0,
        "success": False,
    }
    assert store.limits == [10]


def test_backfill_failed_save_is_not_counted():
    store = FakeContentStore([{"id": "s1", "original_url": "https://example.com/1"}], fail_saves=True)
    extractor = FakeExtractor(ExtractionResult(content=CONTENT, quality=0.7, method="dom"))

    report = asyncio.run(ContentBackfillPipeline(store, extractor, delay_seconds=0).run())

    assert report["summary"]["content_found"] == 0
    assert store.limits == [20]


def test_backfill_continues_past_malformed_story_url():
    stories = [
        {"id": "s1", "original_url": "http://[::1", "title_en": "Broken link"},
        {"id": "s2", "original_url": "https://example.com/2", "title_en": "Working link"},
    ]
    store = FakeContentStore(stories)

    async def backfill():
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=ARTICLE_PAGE))
        async with httpx.AsyncClient(transport=transport) as client:
            extractor = ContentExtractor(fetcher=PageFetcher(client=client))
            return await ContentBackfillPipeline(store, extractor, delay_seconds=0).run()

    report = asyncio.run(backfill())

    assert report["summary"] == {"total_processed": 2, "content_found": 1, "content_not_found": 1}
    assert report["results"][0]["method"] == "error"
    assert list(store.saved) == ["s2"]


def test_backfill_handler_runs_pipeline():
    store = FakeContentStore()
    pipeline = ContentBackfillPipeline(store, FakeExtractor(), delay_seconds=0)

    status, body = _post(backfill_content_handler, {"limit": 100}, pipeline=pipeline)

    assert status == 200
    assert body["summary"]["total_processed"] == 0
    assert store.limits == [50]


class _UpdateQuery:
    def __init__(self, error=None):
        self.error = error
        self.payload = None

    def update(self, payload):
        self.payload = payload
        return self

    def eq(self, column, value):
        return self

    def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=[{"id": "story-1"}])


def test_story_content_store_rounds_quality():
    query = _UpdateQuery()
    store = StoryContentStore(client=SimpleNamespace(table=lambda name: query))

    assert store.save_content("story-1", CONTENT, 0.85671) is True
    assert query.payload == {"full_content": CONTENT, "content_quality": 0.857}


def test_story_content_store_save_failure_returns_false():
    query = _UpdateQuery(error=RuntimeError("timeout"))
    store = StoryContentStore(client=SimpleNamespace(table=lambda name: query))

    assert store.save_content("story-1", CONTENT, 0.5) is False
