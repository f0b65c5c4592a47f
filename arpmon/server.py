"""
Threaded HTTP server hosting the query API.

The server runs in a background thread so the main thread stays free to
wait for termination signals. shutdown() gives in-flight requests a bounded
drain window; it never waits on the scan workers.
"""

import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import make_server

from .utils.logger import Logger, get_logger


class MonitorServer:
    """Background Werkzeug server for a Flask app."""

    def __init__(self, app: Flask, host: str, port: int, logger: Optional[Logger] = None):
        self.app = app
        self.host = host
        self.port = port
        self.logger = logger or get_logger(__name__)
        self._server = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Bind the socket and start serving in a daemon thread."""
        self._server = make_server(self.host, self.port, self.app, threaded=True)
        self.port = self._server.server_port
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="http-server", daemon=True
        )
        self._thread.start()
        self.logger.info(f"Serving host table on http://{self.host}:{self.port}")

    def shutdown(self, drain_timeout: float = 5.0) -> bool:
        """
        Stop accepting requests and wait for the serving thread.

        Args:
            drain_timeout: Seconds to wait for the server to stop

        Returns:
            True if the server stopped within the deadline
        """
        if self._server is None:
            return True

        # shutdown() blocks until serve_forever returns, so bound it from outside
        stopper = threading.Thread(target=self._server.shutdown, name="http-shutdown", daemon=True)
        stopper.start()
        stopper.join(drain_timeout)
        if stopper.is_alive():
            self.logger.warning(f"HTTP server did not stop within {drain_timeout}s")
            return False

        self._server.server_close()
        self._thread.join(drain_timeout)
        self.logger.debug("HTTP server has terminated")
        return True
