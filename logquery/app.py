"""Flask application exposing log ingestion and querying."""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from logquery.config import load_config
from logquery.errors import LogQueryError, StoreUnavailable
from logquery.filters import parse_criteria
from logquery.ingest import LogIngestor
from logquery.query import run_query
from logquery.store import RecordStore
from logquery.validator import LogValidator

logger = logging.getLogger(__name__)


def _error(status_code, message, **extra):
    body = {"status": "error", "message": message}
    body.update(extra)
    return jsonify(body), status_code


def create_app(config=None):
    """Flask application factory."""
    app = Flask(__name__)

    if config is None:
        config = load_config()

    CORS(app, origins=config["cors"]["origins"])

    store = RecordStore(config["storage"]["path"])
    validator = LogValidator(config["validation"]["schema_path"])
    ingestor = LogIngestor(store, validator)
    query_cfg = config["query"]

    # Store components on app for access in tests
    app.config["components"] = {
        "config": config,
        "store": store,
        "validator": validator,
        "ingestor": ingestor,
    }

    # --- Error handling ---

    @app.errorhandler(StoreUnavailable)
    def store_unavailable(exc):
        logger.error("Store unavailable: %s", exc)
        return _error(500, "Internal server error", error=str(exc))

    @app.errorhandler(LogQueryError)
    def domain_error(exc):
        return _error(exc.status_code, str(exc))

    @app.errorhandler(HTTPException)
    def http_error(exc):
        return _error(exc.code, exc.description)

    @app.errorhandler(Exception)
    def unhandled(exc):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(500, "Internal server error", error=str(exc))

    # --- Routes ---

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "total_logs": store.count(),
            "validation_stats": validator.get_stats(),
        })

    @app.route("/logs", methods=["POST"])
    def ingest_log():
        log_entry = request.get_json(silent=True)
        record = ingestor.ingest(log_entry)
        return jsonify({
            "status": "success",
            "message": "Log successfully created and stored.",
            "data": record.to_dict(),
        }), 201

    @app.route("/logs", methods=["GET"])
    def get_logs():
        criteria = parse_criteria(
            request.args,
            default_limit=query_cfg["default_limit"],
            max_limit=query_cfg["max_limit"],
        )
        page = run_query(store.load_all(), criteria)
        return jsonify(page.to_dict())

    return app
