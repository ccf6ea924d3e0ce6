"""Output formatting: terminal table, Markdown and JSON."""
from __future__ import annotations

import json
from typing import Any, Iterable

Record = dict[str, Any]


def _format_date(iso: str | None) -> str:
    """Calendar part of an ISO timestamp, or a placeholder."""
    return iso[:10] if iso else "-"


def _truncate(text: str, width: int) -> str:
    return text[:width - 3] + "..." if len(text) > width else text


def filter_subject(records: Iterable[Record], subject: str | None) -> list[Record]:
    """Records whose subject matches, case-insensitively. None keeps everything."""
    if not subject:
        return list(records)
    wanted = subject.upper()
    return [r for r in records if str(r.get("subject", "")).upper() == wanted]


def group_by_subject(records: Iterable[Record]) -> dict[str, list[Record]]:
    """Records bucketed by subject code, subjects in sorted order."""
    groups: dict[str, list[Record]] = {}
    for record in records:
        groups.setdefault(record.get("subject") or "GENERAL", []).append(record)
    return dict(sorted(groups.items()))


def format_table(records: list[Record]) -> str:
    """Fixed-width table for the terminal."""
    lines = [f"  {'#':>3}  {'ID':<12}  {'Subject':<10}  {'Date':<10}  Title"]
    for i, r in enumerate(records, 1):
        title = _truncate(r.get("title") or "", 50)
        lines.append(
            f"  {i:>3}  {r['id']:<12}  {str(r.get('subject', '')):<10}"
            f"  {_format_date(r.get('publishedAt')):<10}  {title}"
        )
    return "\n".join(lines)


def format_markdown(records: list[Record]) -> str:
    """Markdown reading list, one section per subject."""
    lines = ["# Lectures", "", f"> {len(records)} videos", ""]
    for subject, group in group_by_subject(records).items():
        lines.extend([
            f"## {subject}",
            "",
            "| # | Title | Date | Video |",
            "|---|-------|------|-------|",
        ])
        for i, r in enumerate(group, 1):
            title = (r.get("title") or "").replace("|", "\\|")
            lines.append(
                f"| {i} | {title} | {_format_date(r.get('publishedAt'))} | [YouTube]({r['url']}) |"
            )
        lines.append("")
    return "\n".join(lines)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
