"""
Static landing-page server.

    GET /            -> entry HTML from the frontend root
    GET /vendor/...  -> file from the vendored-library root
    GET /...         -> file from the frontend root

No other routes, no request bodies, no state.
"""

import os
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000


def create_app(frontend_dir: str, vendor_dir: str, index_file: str = "front.html") -> FastAPI:
    """Build the static-file application.

    Args:
        frontend_dir: Directory served at the site root
        vendor_dir: Directory served under /vendor (skipped if missing)
        index_file: Entry page inside frontend_dir served for GET /
    """
    app = FastAPI(title="ZonePlay", docs_url=None, redoc_url=None, openapi_url=None)
    index_path = os.path.join(frontend_dir, index_file)

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(index_path, media_type="text/html")

    if os.path.isdir(vendor_dir):
        app.mount("/vendor", StaticFiles(directory=vendor_dir), name="vendor")
    else:
        logger.warning("Vendor directory not found: %s", vendor_dir)

    app.mount("/", StaticFiles(directory=frontend_dir), name="frontend")

    return app


def resolve_port(default: int = DEFAULT_PORT) -> int:
    """Port from the PORT environment variable, else the default."""
    value = os.environ.get("PORT")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring invalid PORT=%r, using %d", value, default)
        return default


def serve(config) -> None:
    """Run the static server with uvicorn until interrupted."""
    server_cfg = config.server
    frontend_dir = config.resolve_path(server_cfg.get("frontend_dir", "frontend"))
    vendor_dir = config.resolve_path(server_cfg.get("vendor_dir", "vendor"))
    host = server_cfg.get("host", "0.0.0.0")
    port = resolve_port(server_cfg.get("port", DEFAULT_PORT))

    app = create_app(frontend_dir, vendor_dir, server_cfg.get("index_file", "front.html"))

    logger.info("Server running on http://localhost:%d", port)
    uvicorn.run(app, host=host, port=port, log_level="info")
