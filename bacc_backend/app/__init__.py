"""Builds the BACC Flask app: CORS, security headers, rate limiting and stores."""

from http import HTTPStatus
from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from bacc_backend.app.api.research import research_bp
from bacc_backend.app.api.routes import api_bp
from bacc_backend.config import load_config
from bacc_backend.core.health import get_health_message
from bacc_backend.core.records import JsonRecordStore
from bacc_backend.core.research import ResearchStore
from bacc_backend.schemas.health import HealthResponse

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance.

    The research store is initialised eagerly, so a misconfigured database
    path raises ``ResearchStoreError`` here rather than on the first request.
    """
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    if config:
        app.config.from_mapping(config)

    CORS(app, origins="*", send_wildcard=True)

    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    limiter = Limiter(
        get_remote_address,
        app=app,
        application_limits=[app.config["RATE_LIMIT"]],
        storage_uri="memory://",
        strategy="moving-window",
    )
    app.extensions["bacc.limiter"] = limiter

    @app.errorhandler(HTTPStatus.TOO_MANY_REQUESTS)
    def _handle_rate_limit(exc):
        return (
            jsonify({"error": "Too many requests, please try again later."}),
            HTTPStatus.TOO_MANY_REQUESTS,
        )

    research_store = ResearchStore(app.config["RESEARCH_DB"])
    research_store.init()
    app.extensions["bacc.stores"] = {
        "calculations": JsonRecordStore(app.config["CALCULATIONS_FILE"], label="calculation"),
        "surveys": JsonRecordStore(app.config["SURVEY_FILE"], label="survey"),
        "research": research_store,
    }

    @app.get("/")
    def health() -> Any:
        """Liveness check."""
        return jsonify(HealthResponse(message=get_health_message()).model_dump())

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(research_bp, url_prefix="/api")
    return app
