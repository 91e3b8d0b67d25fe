"""HTTP routes of the URL shortener."""

from __future__ import annotations

import json
import logging
import os
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, redirect, request, send_from_directory

from .config import Config
from .errors import (
    CannotShortenOwnDomainError,
    InvalidURLError,
    ShortCodeExistsError,
    URLNotFoundError,
)
from .models import ShortenRequest
from .service import URLService

logger = logging.getLogger(__name__)

_SHORTEN_ERRORS = {
    InvalidURLError: (HTTPStatus.BAD_REQUEST, "Invalid URL"),
    ShortCodeExistsError: (HTTPStatus.CONFLICT, "Custom code already in use"),
    CannotShortenOwnDomainError: (HTTPStatus.BAD_REQUEST, "Cannot shorten own domain"),
}


def _json_response(status: int, data: Any) -> Response:
    return Response(json.dumps(data) + "\n", status=status, mimetype="application/json")


def _error_response(status: int, message: str) -> Response:
    return _json_response(status, {"error": message})


def _not_found() -> Response:
    return Response("404 page not found\n", status=HTTPStatus.NOT_FOUND, mimetype="text/plain")


def _parse_shorten_request() -> ShortenRequest:
    data = json.loads(request.get_data())
    if data is None:
        return ShortenRequest(url="")
    return ShortenRequest.from_dict(data)


def create_app(
    service: URLService, config: Config, static_dir: str = "web/static"
) -> Flask:
    """Build the Flask application serving the API, pages and redirects."""
    app = Flask(__name__, static_folder=None)
    app.config["SHORTENER_CONFIG"] = config
    app.extensions["urlshortener"] = service
    static_root = os.path.abspath(static_dir)

    @app.before_request
    def _log_and_preflight():
        logger.info("[%s] %s %s", request.method, request.path, request.remote_addr)
        if request.method == "OPTIONS":
            return Response(status=HTTPStatus.OK)
        return None

    @app.after_request
    def _cors(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(HTTPStatus.NOT_FOUND)
    def _handle_not_found(_error):
        return _not_found()

    @app.post("/api/shorten")
    def shorten_url():
        try:
            shorten_request = _parse_shorten_request()
        except ValueError:
            return _error_response(HTTPStatus.BAD_REQUEST, "Invalid request body")
        try:
            resp = service.shorten_url(shorten_request)
        except Exception as exc:
            status, message = _SHORTEN_ERRORS.get(
                type(exc), (HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to shorten URL")
            )
            if status == HTTPStatus.INTERNAL_SERVER_ERROR:
                logger.error("Failed to shorten URL: %s", exc)
            return _error_response(status, message)
        return _json_response(HTTPStatus.OK, resp.to_dict())

    @app.get("/api/stats/<short_code>")
    def get_stats(short_code: str):
        try:
            stats = service.get_url_stats(short_code)
        except URLNotFoundError:
            return _not_found()
        except Exception as exc:
            logger.error("Failed to get stats for %s: %s", short_code, exc)
            return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to get stats")
        return _json_response(HTTPStatus.OK, stats.to_dict())

    @app.get("/")
    def serve_home():
        return send_from_directory(static_root, "index.html")

    @app.get("/stats.html")
    def serve_stats():
        return send_from_directory(static_root, "stats.html")

    @app.get("/<short_code>")
    def redirect_short_code(short_code: str):
        logger.info("Redirect handler called with shortCode: %s", short_code)
        try:
            original_url = service.redirect_url(short_code)
        except URLNotFoundError:
            return _not_found()
        except Exception as exc:
            logger.error("Redirect failed for %s: %s", short_code, exc)
            return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
        return redirect(original_url, code=HTTPStatus.MOVED_PERMANENTLY)

    return app