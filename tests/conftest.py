"""Shared test fixtures for the link metadata test suite."""

from typing import Any

import anyio
import pytest
import respx

from link_metadata.models import LinkMetadata, Note
from link_metadata.notes import InMemoryNoteStore
from link_metadata.utils.urls import domain_of

# ─── Pytest Configuration ────────────────────────────────────────


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no I/O)")
    config.addinivalue_line("markers", "integration: Integration tests")


# ─── Async Backend ───────────────────────────────────────────────


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# ─── Settings Fixtures ───────────────────────────────────────────


@pytest.fixture
def test_settings():
    """Settings with no API key and no throttling."""
    from link_metadata.config import Settings

    return Settings(
        debug=True,
        log_level="DEBUG",
        unfurl_api_key=None,
        inter_request_delay_seconds=0,
        backfill_stagger_seconds=0,
    )


# ─── HTTP Mocking ────────────────────────────────────────────────


@pytest.fixture
def mock_http():
    """RESPX mock router for HTTP mocking."""
    with respx.mock(assert_all_called=False) as router:
        yield router


# ─── Unfurler Doubles ────────────────────────────────────────────


class RecordingUnfurler:
    """Unfurler double that records calls and concurrent fetches."""

    def __init__(
        self,
        results: dict[str, LinkMetadata] | None = None,
        delay: float = 0.0,
        fail_urls: set[str] | None = None,
    ) -> None:
        self.results = results or {}
        self.delay = delay
        self.fail_urls = fail_urls or set()
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self.closed = False

    @property
    def name(self) -> str:
        return "recording"

    async def fetch(self, url: str) -> LinkMetadata:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await anyio.sleep(self.delay)
            if url in self.fail_urls:
                return LinkMetadata.fallback(url)
            if url in self.results:
                return self.results[url]
            return LinkMetadata(title=f"Title of {url}", site_name=domain_of(url))
        finally:
            self.active -= 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_unfurler():
    """Factory for RecordingUnfurler instances."""
    return RecordingUnfurler


@pytest.fixture
def recording_unfurler() -> RecordingUnfurler:
    return RecordingUnfurler()


# ─── Note Fixtures ───────────────────────────────────────────────


@pytest.fixture
def link_note() -> Note:
    """Untitled link note."""
    return Note(id=1, type="link", content="https://example.com/a", title="")


@pytest.fixture
def note_store(link_note) -> InMemoryNoteStore:
    """Store holding a single untitled link note."""
    return InMemoryNoteStore([link_note])


# ─── Sample Data Fixtures ────────────────────────────────────────


@pytest.fixture
def sample_microlink_response() -> dict:
    """Sample Microlink API response for mocking."""
    return {
        "status": "success",
        "data": {
            "title": "  Example Domain  ",
            "description": "This domain is for use in illustrative examples in documents.",
            "lang": "en",
            "author": None,
            "publisher": "Example",
            "image": {
                "url": "https://example.com/og.png",
                "type": "png",
                "width": 1200,
                "height": 630,
            },
            "logo": {
                "url": "https://example.com/favicon.ico",
                "type": "ico",
            },
            "url": "https://example.com/",
        },
    }
