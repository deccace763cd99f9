"""Static asset server for the generated site.

GET /        → <root>/index.html
GET /<path>  → <root>/<path>, Content-Type from the file extension
Anything that cannot be read is a 404 with a plain-text body naming the path.

Run:
    uv run python -m tempmatrix.server
"""

import logging
import posixpath
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".js": "text/javascript",
    ".css": "text/css",
    ".csv": "text/csv",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".svg": "image/svg+xml",
}
DEFAULT_MIME_TYPE = "application/octet-stream"
INDEX_DOCUMENT = "index.html"


def content_type_for(path: str | Path) -> str:
    """Content type from the file extension; unknown extensions are binary."""
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def resolve_path(root: Path, url_path: str) -> Path | None:
    """Map a request path onto a file under root.

    The query string is dropped and percent-escapes decoded. Returns None for
    paths that would leave root.
    """
    path = unquote(urlsplit(url_path).path)
    if path in ("", "/"):
        return root / INDEX_DOCUMENT
    normalized = posixpath.normpath(path).lstrip("/")
    if normalized.startswith("..") or normalized == ".":
        return None
    candidate = (root / normalized).resolve()
    try:
        candidate.relative_to(root.resolve())
    except ValueError:
        return None
    return candidate


class AssetRequestHandler(BaseHTTPRequestHandler):
    """Serves files from the server's root directory. GET only."""

    server: "AssetServer"

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self) -> None:
        target = resolve_path(self.server.root, self.path)
        try:
            if target is None:
                raise FileNotFoundError(self.path)
            data = target.read_bytes()
        except OSError:
            # missing, a directory, or unreadable: all the same to the client
            body = f"404: File Not Found -> {self.path}".encode("utf-8")
            self._send(404, body, "text/plain; charset=utf-8")
            return
        self._send(200, data, content_type_for(target))

    def log_message(self, format: str, *args) -> None:
        logger.info("%s - %s", self.address_string(), format % args)


class AssetServer(ThreadingHTTPServer):
    """ThreadingHTTPServer that remembers which directory it serves."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int], root: Path):
        self.root = Path(root)
        super().__init__(address, AssetRequestHandler)


def make_server(root: str | Path, host: str = "127.0.0.1", port: int = 3000) -> AssetServer:
    """Create (but do not start) a server for root. port=0 picks a free port."""
    return AssetServer((host, port), Path(root))


def serve(root: str | Path, host: str = "127.0.0.1", port: int = 3000) -> None:
    """Serve root until interrupted."""
    server = make_server(root, host, port)
    bound_host, bound_port = server.server_address[:2]
    logger.info(f"Server running at http://{bound_host}:{bound_port}/ (root: {server.root})")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Stopped.")
    finally:
        server.server_close()


if __name__ == "__main__":
    from tempmatrix.config import load_settings

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    serve(settings.site_dir, settings.host, settings.port)
