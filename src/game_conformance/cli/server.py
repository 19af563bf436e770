"""Local static file server for serving the game tree during a run."""

from __future__ import annotations

import http.server
import socketserver
import threading
from pathlib import Path
from typing import Optional


class _QuietHandler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, _format: str, *_args: object) -> None:
        return


class _ReusableTCPServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    allow_reuse_address = True
    daemon_threads = True


class StaticServer:
    """Serve ``root`` over HTTP on a background thread.

    ```python
    with StaticServer(Path("."), port=8080) as server:
        print(server.base_url)
    ```
    """

    def __init__(self, root: Path, host: str = "127.0.0.1", port: int = 8080):
        if not root.is_dir():
            raise ValueError(f"Directory to serve does not exist: {root}")
        self.root = root
        self.host = host
        self.port = port
        self._server: Optional[_ReusableTCPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def base_url(self) -> str:
        port = self._server.server_address[1] if self._server else self.port
        return f"http://{self.host}:{port}"

    def start(self) -> "StaticServer":
        root = str(self.root)
        handler = lambda *args, **kwargs: _QuietHandler(*args, directory=root, **kwargs)
        self._server = _ReusableTCPServer((self.host, self.port), handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._server = None
        self._thread = None

    def __enter__(self) -> "StaticServer":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
