"""Custom exceptions for lecture-queue."""


class LectureQueueError(Exception):
    """Base exception for all lecture-queue errors."""


class InvalidLinkError(LectureQueueError):
    """No video identifier could be extracted from the link."""


class MetadataFetchError(LectureQueueError):
    """Failed to fetch video metadata."""


class StorageError(LectureQueueError):
    """The video store could not be written."""
