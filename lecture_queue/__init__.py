"""lecture-queue: collect video lecture links and infer their metadata."""

__version__ = "0.1.0"
