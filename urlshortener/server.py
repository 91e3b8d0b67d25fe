"""Command that starts the URL shortener web server."""

from __future__ import annotations

import argparse
import logging
import sys

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from . import config as config_module
from .config import Config
from .database import connect, migrate
from .handlers import create_app
from .repository import SQLURLRepository
from .service import URLService

logger = logging.getLogger(__name__)

ENGINE_EXTENSION = "urlshortener.engine"
_STATIC_DIR = "web/static"


def build_app(config: Config) -> Flask:
    """Connect to the database, create the schema and assemble the application."""
    try:
        engine = connect(config.database_url)
    except (SQLAlchemyError, ImportError) as exc:
        raise RuntimeError(f"Failed to connect to database: {exc}") from exc
    try:
        migrate(engine)
    except SQLAlchemyError as exc:
        engine.dispose()
        raise RuntimeError(f"Failed to run migration: {exc}") from exc

    service = URLService(SQLURLRepository(engine), config)
    app = create_app(service, config, _STATIC_DIR)
    app.extensions[ENGINE_EXTENSION] = engine
    return app


def main(argv: list[str] | None = None) -> int:
    """Load the configuration and serve the application until stopped."""
    parser = argparse.ArgumentParser(
        prog="urlshortener",
        description="Serve the URL shortener. Settings come from the environment and .env.",
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    config = config_module.load()
    try:
        port = int(config.port)
    except ValueError:
        sys.exit(f"Invalid port: {config.port}")

    try:
        app = build_app(config)
    except RuntimeError as exc:
        logger.error("%s", exc)
        sys.exit(str(exc))

    logger.info("Server starting on port %s", config.port)
    try:
        app.run(host="0.0.0.0", port=port)
    finally:
        app.extensions["urlshortener"].close()
        app.extensions[ENGINE_EXTENSION].dispose()
    return 0