"""The video collection: composition plus storage behind one object."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from .metadata import MetadataProvider, fetch_metadata
from .records import BulkResult, VideoRecord, process_many, process_video_url
from .storage import Record, VideoRepository, is_valid_item

log = logging.getLogger(__name__)


class VideoLibrary:
    """CRUD operations over a repository of video records."""

    def __init__(self, repository: VideoRepository, fetch: MetadataProvider = fetch_metadata):
        self.repository = repository
        self.fetch = fetch

    def list_videos(self) -> list[Record]:
        return self.repository.find_all()

    def add(self, url: str) -> VideoRecord:
        """Add one link. Re-adding a video refreshes every derived field."""
        record = process_video_url(url, fetch=self.fetch)
        self.repository.upsert_replace(record.to_dict())
        log.info("Added video %s - %s", record.id, record.title)
        return record

    def add_many(self, urls: Iterable[str]) -> BulkResult:
        """Add many links; individual failures are reported, not raised."""
        outcome = process_many(urls, fetch=self.fetch)
        for record in outcome.results:
            self.repository.upsert_replace(record.to_dict())
        log.info("Bulk add: %d added, %d failed", outcome.added, outcome.errors)
        return outcome

    def remove(self, video_id: str) -> bool:
        removed = self.repository.delete_by_id(video_id)
        if removed:
            log.info("Deleted video %s", video_id)
        else:
            log.info("Video not found: %s", video_id)
        return removed

    def clear(self) -> None:
        self.repository.delete_all()
        log.info("Cleared all videos")

    def export(self) -> list[Record]:
        return self.list_videos()

    def import_items(self, items: list[Any]) -> int:
        """Replace the whole collection. Returns how many records are now stored.

        Items without string id/url are dropped; when ids repeat, the last
        item with that id wins.
        """
        valid = [item for item in items if is_valid_item(item)]
        self.repository.replace_all(valid)
        count = len(self.repository.find_all())
        log.info("Imported %d videos (%d dropped)", count, len(items) - count)
        return count

    def merge_items(self, items: list[Any]) -> int:
        """Upsert items field by field. Returns how many were upserted."""
        upserted = 0
        for item in items:
            if is_valid_item(item):
                self.repository.upsert_merge(item)
                upserted += 1
        log.info("Merged %d videos", upserted)
        return upserted

    def debug_info(self) -> dict[str, Any]:
        videos = self.list_videos()
        info = {
            "videoCount": len(videos),
            "lastUpdated": videos[0].get("addedAt") if videos else None,
            "videos": [{"id": v["id"], "title": v.get("title")} for v in videos],
        }
        info.update(self.repository.describe())
        return info
