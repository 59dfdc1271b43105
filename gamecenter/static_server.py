"""
Minimal static file server for the game center site.

Serves files relative to the repository root the same way a static host
would: `/` maps to index.html, unknown extensions are served as text/plain,
and nothing outside the root is reachable.
"""

import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".html": "text/html",
    ".js": "text/javascript",
    ".json": "application/json",
    ".css": "text/css",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

DEFAULT_CONTENT_TYPE = "text/plain"


def content_type_for(path: Path) -> str:
    """Get the Content-Type for a file based on its extension."""
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_request_path(root: Path, url_path: str) -> Path | None:
    """
    Map a URL path to a file under root.

    Returns None if the normalized path would escape root.
    """
    relative = url_path.lstrip("/") or "index.html"
    root = Path(os.path.normpath(root))
    candidate = Path(os.path.normpath(root / relative))
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def create_static_app(root: Path | str) -> FastAPI:
    """Create an app that serves the files under root."""
    root = Path(root).resolve()
    app = FastAPI(title="Game Center static server", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/{file_path:path}")
    def serve_file(file_path: str):
        target = resolve_request_path(root, file_path)
        if target is None:
            return PlainTextResponse("Forbidden", status_code=403)

        if not target.is_file():
            return PlainTextResponse("Not Found", status_code=404)

        try:
            data = target.read_bytes()
        except OSError as e:
            logger.error("Failed to read %s: %s", target, e)
            return PlainTextResponse("Internal Server Error", status_code=500)

        return Response(content=data, media_type=content_type_for(target))

    return app
