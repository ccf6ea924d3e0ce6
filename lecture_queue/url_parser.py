"""YouTube URL parsing: video ID extraction and canonical watch URLs."""
from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

SHORT_HOST = "youtu.be"
MAIN_DOMAIN = "youtube.com"

# Path markers that are followed by the video ID: /shorts/ID, /embed/ID
PATH_MARKERS = ("shorts", "embed")


def extract_video_id(url: str) -> str | None:
    """Extract the YouTube video ID from a URL.

    Returns None when the string is not an absolute URL or does not point
    at a recognizable video. Never raises for malformed input.
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
    except (AttributeError, TypeError, ValueError):
        return None

    if not parsed.scheme or not host:
        return None

    # Short URL: youtu.be/ID
    if host == SHORT_HOST:
        vid = parsed.path[1:].split("/", 1)[0]
        return vid or None

    if MAIN_DOMAIN in host:
        # Standard watch URL: ?v=ID
        qs = parse_qs(parsed.query)
        if qs.get("v"):
            return qs["v"][0]

        # Path-based: /shorts/ID, /embed/ID
        parts = [p for p in parsed.path.split("/") if p]
        for i, part in enumerate(parts):
            if part in PATH_MARKERS:
                return parts[i + 1] if i + 1 < len(parts) else None

    return None


def watch_url(video_id: str) -> str:
    """Canonical watch URL for a video ID."""
    return f"https://www.youtube.com/watch?v={video_id}"
