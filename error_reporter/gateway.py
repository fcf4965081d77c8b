"""Flask HTTP surface for reporting errors and browsing the recorded history."""

import logging
import math
import os

from flask import Flask, jsonify, render_template, request
from flask_cors import CORS

from error_reporter.history import StoreReadError
from error_reporter.service import InvalidReport, RateLimitExceeded, ServiceContext
from error_reporter.store import PersistenceError

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

LOGS_POLL_INTERVAL_MS = 10000


def create_app(context: ServiceContext) -> Flask:
    """Flask application factory."""
    app = Flask(__name__, template_folder=_TEMPLATE_DIR)
    app.config["CONTEXT"] = context
    CORS(app, origins=context.config.cors_origins)

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "recorded": context.store.appended_count,
            "tracked_clients": context.rate_limiter.tracked_clients,
            "validation": context.validator.get_stats(),
        })

    @app.route("/report-error", methods=["POST"])
    def report_error():
        payload = request.get_json(silent=True)
        try:
            record = context.ingest(payload, request.remote_addr or "unknown")
        except InvalidReport as e:
            return jsonify({"message": e.failure.message}), 400
        except RateLimitExceeded as e:
            response = jsonify({"message": "Too many requests, please try again later."})
            response.headers["Retry-After"] = str(math.ceil(e.retry_after))
            return response, 429
        except PersistenceError:
            logger.exception("Failed to record error report")
            return jsonify({"message": "Could not record error report"}), 500

        return jsonify({"message": record.message, "recommendation": record.recommendation}), 200

    @app.route("/api/logs")
    def api_logs():
        try:
            entries = context.read_history()
        except StoreReadError:
            logger.exception("Failed to read error log")
            return jsonify({"message": "Could not read log file"}), 500
        return jsonify({"logs": [entry.to_dict() for entry in entries]})

    @app.route("/logs")
    def logs_page():
        return render_template("logs.html", poll_interval_ms=LOGS_POLL_INTERVAL_MS)

    return app
