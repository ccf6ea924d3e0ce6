"""Video metadata fetching via the YouTube oEmbed API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import requests

from .errors import MetadataFetchError

log = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
DEFAULT_TIMEOUT = 10.0


@dataclass
class VideoMetadata:
    """What a metadata provider knows about a video."""
    title: str | None = None
    thumbnail_url: str | None = None


# A metadata provider takes a canonical watch URL and returns its metadata,
# raising MetadataFetchError on failure.
MetadataProvider = Callable[[str], VideoMetadata]


def fetch_metadata(url: str, timeout: float = DEFAULT_TIMEOUT) -> VideoMetadata:
    """Fetch title and thumbnail via the YouTube oEmbed endpoint.

    Returns title and thumbnail URL only; oEmbed has no upload date.
    """
    try:
        resp = requests.get(
            OEMBED_URL,
            params={"url": url, "format": "json"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise MetadataFetchError(f"oEmbed request failed: {e}") from e
    except ValueError as e:
        raise MetadataFetchError(f"oEmbed returned invalid JSON: {e}") from e

    log.debug("oEmbed title for %s: %s", url, data.get("title"))
    return VideoMetadata(
        title=data.get("title"),
        thumbnail_url=data.get("thumbnail_url"),
    )


def make_provider(timeout: float = DEFAULT_TIMEOUT) -> MetadataProvider:
    """Bind the fetch timeout into a single-argument metadata provider."""
    def provider(url: str) -> VideoMetadata:
        return fetch_metadata(url, timeout=timeout)
    return provider
