"""lecture-queue CLI entry point."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .errors import LectureQueueError
from .formatter import filter_subject, format_json, format_markdown, format_table
from .library import VideoLibrary
from .metadata import DEFAULT_TIMEOUT, make_provider
from .storage import DEFAULT_STORE, JsonFileRepository

log = logging.getLogger("lecture-queue")

USAGE = """\
usage: lecture-queue <command> [options]

Commands:
  add URL              Add one video link
  batch [URL ...]      Add many links (--from-file, --json, --jsonl)
  list                 Show saved videos (--json, --markdown, --subject)
  remove ID            Delete one video
  clear                Delete every video
  export               Write all videos as JSON (-o FILE)
  import FILE          Replace all videos with the contents of FILE
  merge FILE           Upsert the videos in FILE into the collection
  serve                Run the HTTP API
  version              Print the version

Run 'lecture-queue <command> -h' for command options.
"""


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def _new_parser(command: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"lecture-queue {command}",
        description=description,
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=Path(os.environ.get("LECTURE_QUEUE_STORE", DEFAULT_STORE)),
        help="Snapshot file holding the collection "
             "(default: $LECTURE_QUEUE_STORE or ./videos-storage.json)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env_float("LECTURE_QUEUE_TIMEOUT", DEFAULT_TIMEOUT),
        help="Metadata fetch timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def _setup_logging(verbose: bool, default: int = logging.WARNING) -> None:
    level = logging.DEBUG if verbose else default
    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=level,
        stream=sys.stderr,
    )


def _open_library(args: argparse.Namespace) -> VideoLibrary:
    repository = JsonFileRepository(args.store)
    return VideoLibrary(repository, fetch=make_provider(timeout=args.timeout))


def _read_items(path: Path) -> list:
    """Load an export file: either a bare list or {"items": [...]}/{"videos": [...]}."""
    if not path.is_file():
        raise LectureQueueError(f"File not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise LectureQueueError(f"{path} is not valid JSON: {e}") from e
    if isinstance(data, dict):
        data = data.get("items", data.get("videos"))
    if not isinstance(data, list):
        raise LectureQueueError(f"{path} does not contain a list of videos")
    return data


def _jsonl_write(obj: dict) -> None:
    """Write a JSON object as a single line to stdout, flush immediately."""
    sys.stdout.write(json.dumps(obj, ensure_ascii=False) + "\n")
    sys.stdout.flush()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def add_main(argv: list[str]) -> int:
    parser = _new_parser("add", "Add one video link to the collection.")
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument("--json", action="store_true", dest="json_output",
                        help="Print the saved record as JSON")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    record = _open_library(args).add(args.url)
    if args.json_output:
        sys.stdout.write(format_json(record.to_dict()) + "\n")
    else:
        print(f"Added: {record.title} [{record.subject}] ({record.id})")
    return 0


def batch_main(argv: list[str]) -> int:
    parser = _new_parser("batch", "Add many video links (non-interactive).")
    parser.add_argument(
        "urls",
        nargs="*",
        help="One or more YouTube video URLs",
    )
    parser.add_argument(
        "--from-file",
        type=Path,
        default=None,
        dest="from_file",
        help="Read URLs from a text file (one per line, # comments and blank lines ignored)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the aggregate result as JSON",
    )
    parser.add_argument(
        "--jsonl",
        action="store_true",
        dest="jsonl_output",
        help="Print one JSON object per line as each link completes",
    )
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    # Merge positional URLs with --from-file entries
    urls = list(args.urls or [])
    if args.from_file is not None:
        if not args.from_file.is_file():
            print(f"Error: File not found: {args.from_file}", file=sys.stderr)
            return 1
        for line in args.from_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            urls.append(line)

    if not urls:
        print("Error: No URLs given. Pass them as arguments or via --from-file.", file=sys.stderr)
        return 1

    library = _open_library(args)

    if args.jsonl_output:
        _jsonl_write({"event": "start", "total": len(urls)})
        added = failed = 0
        for i, url in enumerate(urls, 1):
            outcome = library.add_many([url])
            if outcome.results:
                added += 1
                record = outcome.results[0]
                _jsonl_write({"event": "progress", "index": i, "url": url,
                              "status": "added", "id": record.id, "title": record.title})
            else:
                failed += 1
                _jsonl_write({"event": "progress", "index": i, "url": url,
                              "status": "error", "error": outcome.error_details[0]["error"]})
        _jsonl_write({"event": "complete", "added": added, "errors": failed})
        return 0

    outcome = library.add_many(urls)

    if args.json_output:
        sys.stdout.write(format_json(outcome.to_dict()) + "\n")
        return 0

    for record in outcome.results:
        print(f"  Added: {record.title} [{record.subject}] ({record.id})")
    for detail in outcome.error_details:
        print(f"  Warning: Skipped {detail['url']} - {detail['error']}", file=sys.stderr)
    print(f"\n{outcome.added}/{len(urls)} videos added, {outcome.errors} failed")
    return 0 if outcome.added else 1


def list_main(argv: list[str]) -> int:
    parser = _new_parser("list", "Show saved videos.")
    parser.add_argument("--subject", default=None, help="Only show this subject code")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--json", action="store_true", dest="json_output", help="Output JSON")
    fmt.add_argument("--markdown", action="store_true", help="Output a Markdown reading list")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    videos = filter_subject(_open_library(args).list_videos(), args.subject)
    if args.json_output:
        sys.stdout.write(format_json(videos) + "\n")
    elif args.markdown:
        sys.stdout.write(format_markdown(videos) + "\n")
    elif not videos:
        print("No videos saved.")
    else:
        print(format_table(videos))
    return 0


def remove_main(argv: list[str]) -> int:
    parser = _new_parser("remove", "Delete one video by ID.")
    parser.add_argument("video_id", help="Video ID as shown by 'list'")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if _open_library(args).remove(args.video_id):
        print(f"Removed: {args.video_id}")
        return 0
    print(f"Video not found: {args.video_id}", file=sys.stderr)
    return 1


def clear_main(argv: list[str]) -> int:
    parser = _new_parser("clear", "Delete every saved video.")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    _open_library(args).clear()
    print("All videos removed.")
    return 0


def export_main(argv: list[str]) -> int:
    parser = _new_parser("export", "Write all videos as a JSON list.")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Write to this file instead of stdout")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    content = format_json(_open_library(args).export()) + "\n"
    if args.output is None:
        sys.stdout.write(content)
        return 0
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(content, encoding="utf-8")
    print(f"Saved: {args.output}")
    return 0


def import_main(argv: list[str]) -> int:
    parser = _new_parser("import", "Replace the collection with an exported file.")
    parser.add_argument("file", type=Path, help="JSON file produced by 'export'")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    count = _open_library(args).import_items(_read_items(args.file))
    print(f"Imported {count} videos.")
    return 0


def merge_main(argv: list[str]) -> int:
    parser = _new_parser("merge", "Upsert the videos of an exported file into the collection.")
    parser.add_argument("file", type=Path, help="JSON file produced by 'export'")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    upserted = _open_library(args).merge_items(_read_items(args.file))
    print(f"Merged {upserted} videos.")
    return 0


def serve_main(argv: list[str]) -> int:
    from .server import create_app

    parser = _new_parser("serve", "Run the HTTP API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", 5000)))
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, default=logging.INFO)

    app = create_app(_open_library(args))
    print(f"\n  lecture-queue  ->  http://{args.host}:{args.port}\n")
    app.run(host=args.host, port=args.port, threaded=True, debug=False)
    return 0


COMMANDS = {
    "add": add_main,
    "batch": batch_main,
    "list": list_main,
    "remove": remove_main,
    "clear": clear_main,
    "export": export_main,
    "import": import_main,
    "merge": merge_main,
    "serve": serve_main,
}


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        sys.stdout.write(USAGE)
        return 0 if argv else 1
    if argv[0] in ("version", "--version"):
        print(f"lecture-queue {__version__}")
        return 0

    command = COMMANDS.get(argv[0])
    if command is None:
        print(f"Error: Unknown command {argv[0]!r}\n", file=sys.stderr)
        sys.stderr.write(USAGE)
        return 1

    try:
        return command(argv[1:])
    except LectureQueueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as e:
        log.exception("Unexpected error")
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
