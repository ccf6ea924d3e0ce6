import pytest

from lecture_queue.errors import MetadataFetchError
from lecture_queue.library import VideoLibrary
from lecture_queue.metadata import VideoMetadata
from lecture_queue.storage import MemoryRepository


class FakeProvider:
    """Metadata provider returning canned titles keyed by watch URL."""

    def __init__(self, titles=None, fail=()):
        self.titles = titles or {}
        self.fail = set(fail)
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url in self.fail:
            raise MetadataFetchError(f"oEmbed request failed: 404 for {url}")
        title = self.titles.get(url, "CS101 Lecture - March 15, 2024")
        return VideoMetadata(title=title, thumbnail_url=f"{url}/thumb.jpg")


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def library(provider):
    return VideoLibrary(MemoryRepository(), fetch=provider)


@pytest.fixture
def make_provider():
    return FakeProvider
