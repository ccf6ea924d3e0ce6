"""Turning pasted links into video records."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from .dates import date_from_title, to_iso
from .errors import InvalidLinkError, LectureQueueError
from .metadata import MetadataProvider, fetch_metadata
from .subject import subject_from_title
from .url_parser import extract_video_id, watch_url

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


@dataclass
class VideoRecord:
    """A saved lecture video."""
    id: str
    title: str
    thumbnail: str
    published_at: str | None
    url: str
    subject: str
    added_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "publishedAt": self.published_at,
            "url": self.url,
            "subject": self.subject,
            "addedAt": self.added_at,
        }


@dataclass
class BulkResult:
    """Outcome of adding many links: what was added and what failed."""
    results: list[VideoRecord] = field(default_factory=list)
    error_details: list[dict[str, str]] = field(default_factory=list)

    @property
    def added(self) -> int:
        return len(self.results)

    @property
    def errors(self) -> int:
        return len(self.error_details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "added": self.added,
            "errors": self.errors,
            "results": [r.to_dict() for r in self.results],
            "errorDetails": self.error_details,
        }


def process_video_url(url: str, fetch: MetadataProvider = fetch_metadata) -> VideoRecord:
    """Build a complete record for a pasted link.

    Raises InvalidLinkError if no video ID can be extracted and
    MetadataFetchError if the provider fails.
    """
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidLinkError(f"Invalid YouTube link: {url}")

    canonical = watch_url(video_id)
    meta = fetch(canonical)
    title = meta.title or DEFAULT_TITLE

    return VideoRecord(
        id=video_id,
        title=title,
        thumbnail=meta.thumbnail_url or "",
        published_at=date_from_title(title),
        url=canonical,
        subject=subject_from_title(title),
        added_at=to_iso(datetime.now(timezone.utc)),
    )


def process_many(urls: Iterable[str], fetch: MetadataProvider = fetch_metadata) -> BulkResult:
    """Process links one by one, collecting failures instead of stopping on them."""
    outcome = BulkResult()
    for url in urls:
        try:
            record = process_video_url(url, fetch=fetch)
        except LectureQueueError as e:
            log.warning("Skipped %s: %s", url, e)
            outcome.error_details.append({"url": url, "error": str(e)})
            continue
        log.debug("Processed %s -> %s", url, record.id)
        outcome.results.append(record)
    return outcome
