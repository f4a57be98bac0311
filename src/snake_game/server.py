"""Minimal static file server for the Snake landing page and assets."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, Response, request
from markupsafe import escape

from .config import (
    CONTENT_TYPES,
    DEFAULT_CONTENT_TYPE,
    INDEX_DOCUMENT,
    public_dir,
    server_port,
)
from .errors import PathTraversalError

logger = logging.getLogger(__name__)


def content_type_for(path: Path | str) -> str:
    """Content type inferred from the file extension, ``text/html`` otherwise."""
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_request_path(root: Path, url_path: str) -> Path:
    """Map a URL path onto a file below ``root``.

    ``url_path`` is the already-decoded request path without its query
    string; it is not parsed again, so ``#``, ``?`` and leading ``//`` are
    plain filename characters. ``/`` maps to the index document. Raises
    PathTraversalError when the result would fall outside ``root``.
    """
    root = root.resolve()
    pathname = url_path or "/"
    if pathname == "/":
        pathname = "/" + INDEX_DOCUMENT
    if "\x00" in pathname:
        raise PathTraversalError(url_path)

    candidate = (root / pathname.lstrip("/\\")).resolve()
    if candidate != root and root not in candidate.parents:
        raise PathTraversalError(url_path)
    return candidate


def _html(body: str, status: int) -> Response:
    return Response(body, status=status, content_type=DEFAULT_CONTENT_TYPE)


def create_app(root: Path | str | None = None) -> Flask:
    """Build the Flask app serving files from ``root`` (default public dir)."""
    app = Flask(__name__, static_folder=None)
    app.config["PUBLIC_DIR"] = Path(root or public_dir()).resolve()

    @app.route("/", defaults={"path": ""}, methods=["GET"])
    @app.route("/<path:path>", methods=["GET"])
    def serve(path: str) -> Response:
        url_path = "/" + path
        served_root: Path = app.config["PUBLIC_DIR"]
        logger.info("Request: %s", request.full_path.rstrip("?"))

        try:
            file_path = resolve_request_path(served_root, url_path)
        except PathTraversalError:
            logger.warning("Rejected path outside %s: %s", served_root, url_path)
            return _html("<h1>403 Forbidden</h1>", 403)

        if not file_path.is_file():
            logger.info("Not found: %s", file_path)
            return _html(
                f"<h1>404 Not Found</h1><p>File not found: {escape(url_path)}</p>", 404
            )

        try:
            data = file_path.read_bytes()
        except OSError as exc:
            logger.error("Could not read %s: %s", file_path, exc)
            return _html(
                f"<h1>404 Not Found</h1><p>File not found: {escape(url_path)}</p>", 404
            )

        logger.info("Serving file: %s", file_path)
        return Response(data, status=200, content_type=content_type_for(file_path))

    return app


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Serve the Snake game files over HTTP")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument(
        "--port", type=int, default=None, help="Port to listen on (default: $PORT or 8082)"
    )
    parser.add_argument("--public-dir", default=None, help="Directory to serve")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    port = args.port or server_port()
    app = create_app(args.public_dir)
    logger.info("Snake Game Server running at http://localhost:%d/", port)
    logger.info("Serving files from: %s", app.config["PUBLIC_DIR"])
    app.run(host=args.host, port=port)


if __name__ == "__main__":
    main()
