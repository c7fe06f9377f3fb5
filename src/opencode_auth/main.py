"""
FastAPI application exposing the OpenCode auth store to a host application.
"""

import argparse
import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, Optional, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog
import uvicorn

from .api.routes import router as api_router
from .config import AuthStoreConfig, load_config
from .stores.auth_file_store import AuthFileStore
from .stores.base import (
    StoreError,
    StoreParseError,
    StoreSchemaError,
    StoreValidationError,
)

logger = structlog.get_logger(__name__)

CONFIG_FILE_ENV = "OPENCODE_AUTH_CONFIG_FILE"

# Most specific first; StoreError catches the rest
_ERROR_RESPONSES: Dict[Type[StoreError], Tuple[int, str]] = {
    StoreValidationError: (400, "validation_error"),
    StoreParseError: (422, "parse_error"),
    StoreSchemaError: (422, "schema_error"),
    StoreError: (500, "store_error"),
}


def configure_logging(debug: bool = False) -> None:
    """Configure structured logging on top of the stdlib root logger."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for FastAPI application."""
    logger.info("Starting OpenCode auth store")

    try:
        if getattr(app.state, "store", None) is None:
            app.state.config = load_config(os.environ.get(CONFIG_FILE_ENV))
            app.state.store = AuthFileStore(app.state.config)
        logger.info("Auth store ready", path=str(app.state.store.auth_file))
        yield

    except Exception as e:
        logger.error("Failed to start application", error=str(e), exc_info=True)
        raise

    finally:
        logger.info("Shutting down OpenCode auth store")


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Translate store errors into JSON error responses."""
    status_code, error_type = 500, "store_error"
    for error_cls, (code, name) in _ERROR_RESPONSES.items():
        if isinstance(exc, error_cls):
            status_code, error_type = code, name
            break

    logger.warning(
        "Store operation failed",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=error_type,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": str(exc),
                "type": error_type,
                "code": error_type,
            }
        },
    )


def create_app(config: Optional[AuthStoreConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration to use; when omitted it is loaded at startup

    Raises:
        StoreEnvironmentError: If config is given and its paths cannot be resolved
    """
    app = FastAPI(
        title="OpenCode Auth Store",
        description="Read, write and remove provider credentials in the OpenCode auth file",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.store = AuthFileStore(config) if config is not None else None

    app.add_exception_handler(StoreError, store_exception_handler)
    app.include_router(api_router)
    return app


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(description="OpenCode Auth Store Server")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host to bind the server to (overrides config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to run the server on (overrides config)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    # The reload worker builds its own app and finds the config through the environment
    if args.config:
        os.environ[CONFIG_FILE_ENV] = args.config

    config = load_config(args.config)
    configure_logging(config.debug)

    uvicorn.run(
        "opencode_auth.main:create_app" if args.reload else create_app(config),
        factory=args.reload,
        host=args.host or config.host,
        port=args.port or config.port,
        reload=args.reload,
        log_config=None,
        access_log=True,
    )


if __name__ == "__main__":
    main()
