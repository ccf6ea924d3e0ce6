"""Subject code inference from lecture titles."""
from __future__ import annotations

import re

DEFAULT_SUBJECT = "GENERAL"

# Course codes such as CS101, MATH-2020, phys220
SUBJECT_RE = re.compile(r"\b([A-Za-z]{2,6}-?\d{2,4})\b", re.ASCII)


def subject_from_title(title: object) -> str:
    """Return the first course code in the title, uppercased, or GENERAL."""
    match = SUBJECT_RE.search(str(title))
    return match.group(1).upper() if match else DEFAULT_SUBJECT
