"""
Application assembly.

``create_app`` builds the FastAPI application: logging, exception handlers and
the resource routers. ``run_app`` serves it with uvicorn.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from mapcrud._version import get_version
from mapcrud.runtime.logging import get_api_logger, log_with_context, setup_logging

if TYPE_CHECKING:
    from fastapi import APIRouter, FastAPI

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ServerConfig:
    """
    Configuration for a mapcrud application.

    Groups all initialization options into a single object. Values not passed
    explicitly can be read from the environment with ``from_env``.
    """

    title: str = "mapcrud API"
    version: str = field(default_factory=get_version)
    description: str = "Metadata-driven CRUD API"

    # Network
    host: str = "127.0.0.1"
    port: int = 3000
    reload: bool = False

    # Logging
    log_level: str = "INFO"
    enable_file_logging: bool = False
    log_dir: Path = field(default_factory=lambda: Path(".mapcrud/logs"))

    # Interactive documentation (None disables it)
    docs_url: str | None = "/api"

    @classmethod
    def from_env(cls, **overrides: object) -> ServerConfig:
        """
        Build a config from ``MAPCRUD_*`` environment variables.

        Reads MAPCRUD_HOST, MAPCRUD_PORT, MAPCRUD_LOG_LEVEL, MAPCRUD_LOG_DIR and
        MAPCRUD_FILE_LOGGING. Keyword overrides that are not None win over the
        environment.
        """
        values: dict[str, object] = {}
        if host := os.environ.get("MAPCRUD_HOST"):
            values["host"] = host
        if port := os.environ.get("MAPCRUD_PORT"):
            try:
                values["port"] = int(port)
            except ValueError:
                raise ValueError(f"MAPCRUD_PORT must be an integer, got {port!r}") from None
        if log_level := os.environ.get("MAPCRUD_LOG_LEVEL"):
            values["log_level"] = log_level.upper()
        if log_dir := os.environ.get("MAPCRUD_LOG_DIR"):
            values["log_dir"] = Path(log_dir)
        if file_logging := os.environ.get("MAPCRUD_FILE_LOGGING"):
            values["enable_file_logging"] = file_logging.strip().lower() in _TRUTHY

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]


def create_app(
    config: ServerConfig | None = None,
    routers: list[APIRouter] | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Server configuration (defaults to ``ServerConfig.from_env()``)
        routers: Routers to mount (defaults to every registered resource)

    Returns:
        FastAPI application

    Example:
        >>> app = create_app(ServerConfig(port=8080))
        >>> # Run with uvicorn: uvicorn --factory mapcrud.runtime.server:create_app
    """
    from fastapi import FastAPI

    from mapcrud.runtime.exception_handlers import register_exception_handlers

    config = config or ServerConfig.from_env()
    setup_logging(
        config.log_dir if config.enable_file_logging else None,
        level=config.log_level,
    )

    if routers is None:
        from mapcrud.resources import load_routers

        routers = load_routers()

    app = FastAPI(
        title=config.title,
        version=config.version,
        description=config.description,
        docs_url=config.docs_url,
    )
    register_exception_handlers(app)
    for router in routers:
        app.include_router(router)

    log_with_context(
        get_api_logger(),
        logging.INFO,
        f"Created {config.title} with {len(app.routes)} routes",
        routers=len(routers),
        docs_url=config.docs_url,
    )
    return app


def run_app(config: ServerConfig | None = None) -> None:
    """
    Serve the application with uvicorn.

    With ``reload`` enabled uvicorn imports the app factory itself, so the
    configuration is exported to the environment for the worker to re-read.
    """
    import uvicorn

    config = config or ServerConfig.from_env()
    logger = get_api_logger()

    if config.reload:
        os.environ["MAPCRUD_LOG_LEVEL"] = config.log_level
        os.environ["MAPCRUD_LOG_DIR"] = str(config.log_dir)
        os.environ["MAPCRUD_FILE_LOGGING"] = "true" if config.enable_file_logging else "false"
        logger.info(f"Serving with reload on http://{config.host}:{config.port}")
        uvicorn.run(
            "mapcrud.runtime.server:create_app",
            factory=True,
            host=config.host,
            port=config.port,
            reload=True,
            log_level=config.log_level.lower(),
        )
        return

    app = create_app(config)
    logger.info(f"Serving on http://{config.host}:{config.port}")
    if config.docs_url:
        logger.info(f"API documentation at http://{config.host}:{config.port}{config.docs_url}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
