from unittest.mock import MagicMock, patch

import pytest
import requests

from lecture_queue.errors import MetadataFetchError
from lecture_queue.metadata import OEMBED_URL, VideoMetadata, fetch_metadata, make_provider

WATCH = "https://www.youtube.com/watch?v=abc123"


def ok_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


def test_oembed_success():
    payload = {"title": "CS101 Lecture 1", "thumbnail_url": "https://i.ytimg.com/vi/abc123/hqdefault.jpg"}
    with patch("lecture_queue.metadata.requests.get", return_value=ok_response(payload)) as get:
        meta = fetch_metadata(WATCH, timeout=3)

    get.assert_called_once_with(OEMBED_URL, params={"url": WATCH, "format": "json"}, timeout=3)
    assert meta == VideoMetadata(
        title="CS101 Lecture 1",
        thumbnail_url="https://i.ytimg.com/vi/abc123/hqdefault.jpg",
    )


def test_oembed_missing_fields():
    with patch("lecture_queue.metadata.requests.get", return_value=ok_response({})):
        meta = fetch_metadata(WATCH)
    assert meta.title is None
    assert meta.thumbnail_url is None


def test_oembed_http_error():
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
    with patch("lecture_queue.metadata.requests.get", return_value=resp):
        with pytest.raises(MetadataFetchError, match="oEmbed request failed"):
            fetch_metadata(WATCH)


def test_oembed_timeout():
    with patch("lecture_queue.metadata.requests.get", side_effect=requests.Timeout("slow")):
        with pytest.raises(MetadataFetchError):
            fetch_metadata(WATCH)


def test_oembed_invalid_json():
    resp = ok_response(None)
    resp.json.side_effect = ValueError("Expecting value")
    with patch("lecture_queue.metadata.requests.get", return_value=resp):
        with pytest.raises(MetadataFetchError, match="invalid JSON"):
            fetch_metadata(WATCH)


def test_make_provider_binds_timeout():
    with patch("lecture_queue.metadata.fetch_metadata", return_value=VideoMetadata()) as fetch:
        make_provider(timeout=2.5)(WATCH)
    fetch.assert_called_once_with(WATCH, timeout=2.5)
