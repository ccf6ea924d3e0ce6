"""HTTP API for the video collection (Flask)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from .dates import to_iso
from .errors import InvalidLinkError, LectureQueueError, MetadataFetchError
from .library import VideoLibrary

log = logging.getLogger(__name__)


def create_app(library: VideoLibrary) -> Flask:
    app = Flask(__name__)
    app.config["LIBRARY"] = library

    # ── helpers ───────────────────────────────────────────────────────────────

    def _json_body() -> dict:
        """Request body as a dict; anything that is not a JSON object counts as empty."""
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _items_payload():
        data = _json_body()
        items = data.get("items")
        return items if isinstance(items, list) else None

    @app.after_request
    def _cors(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(404)
    def _not_found(e):
        return jsonify({
            "error": "Not Found",
            "message": f"Cannot {request.method} {request.path}",
        }), 404

    @app.errorhandler(LectureQueueError)
    def _domain_error(e):
        if isinstance(e, InvalidLinkError):
            status = 422
        elif isinstance(e, MetadataFetchError):
            status = 502
        else:
            status = 500
        log.error("%s %s failed: %s", request.method, request.path, e)
        return jsonify({"error": str(e)}), status

    # ── routes ────────────────────────────────────────────────────────────────

    @app.route("/api/health")
    def api_health():
        return jsonify({"ok": True, "timestamp": to_iso(datetime.now(timezone.utc))})

    @app.route("/api/videos", methods=["GET"])
    def api_list():
        videos = library.list_videos()
        log.info("GET /api/videos - returning %d videos", len(videos))
        return jsonify(videos)

    @app.route("/api/videos", methods=["POST"])
    def api_add():
        data = _json_body()
        url = data.get("url")
        if not url or not isinstance(url, str):
            return jsonify({"error": "url required"}), 400
        log.info("POST /api/videos - adding %s", url)
        record = library.add(url)
        return jsonify(record.to_dict())

    @app.route("/api/videos", methods=["DELETE"])
    def api_clear():
        library.clear()
        return jsonify({"ok": True})

    @app.route("/api/videos/bulk", methods=["POST"])
    def api_bulk():
        data = _json_body()
        urls = data.get("urls")
        if not isinstance(urls, list):
            return jsonify({"error": "urls must be an array"}), 400
        log.info("POST /api/videos/bulk - adding %d videos", len(urls))
        return jsonify(library.add_many(urls).to_dict())

    @app.route("/api/videos/<video_id>", methods=["DELETE"])
    def api_delete(video_id):
        removed = library.remove(video_id)
        return jsonify({
            "ok": True,
            "removed": removed,
            "id": video_id,
            "message": "Video removed successfully" if removed else "Video not found",
        })

    @app.route("/api/export")
    def api_export():
        return jsonify(library.export())

    @app.route("/api/import", methods=["POST"])
    def api_import():
        items = _items_payload()
        if items is None:
            return jsonify({"error": "items must be an array"}), 400
        return jsonify({"ok": True, "count": library.import_items(items)})

    @app.route("/api/merge", methods=["POST"])
    def api_merge():
        items = _items_payload()
        if items is None:
            return jsonify({"error": "items must be an array"}), 400
        return jsonify({"ok": True, "upserted": library.merge_items(items)})

    @app.route("/api/debug")
    def api_debug():
        return jsonify(library.debug_info())

    return app
