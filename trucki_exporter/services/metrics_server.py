# trucki_exporter/services/metrics_server.py

from __future__ import annotations

import threading
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer


METRICS_PATH = "/metrics"


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        # Requests are logged by the app wrapper instead.
        return


class MetricsServer:
    """Serves the registry at /metrics on a background thread."""

    def __init__(self, registry: CollectorRegistry, host: str, port: int, log):
        self.registry = registry
        self.host = host
        self.port = port
        self.log = log
        self._metrics_app = make_wsgi_app(registry)
        self._server = None
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    def app(self, environ, start_response):
        method = environ.get("REQUEST_METHOD", "GET")
        path = environ.get("PATH_INFO", "")
        status_holder = {}

        def _start_response(status, headers, exc_info=None):
            status_holder["status"] = status
            return start_response(status, headers, exc_info)

        if path == METRICS_PATH:
            body = self._metrics_app(environ, _start_response)
        else:
            body = [b"404 page not found\n"]
            _start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])

        code = status_holder.get("status", "").split(" ", 1)[0]
        self.log.debug("%s %s -> %s", method, path, code)
        return body

    # ------------------------------------------------------------------
    def start(self) -> int:
        """Bind and serve; returns the bound port (useful with port 0)."""
        self._server = make_server(
            self.host,
            self.port,
            self.app,
            server_class=ThreadingWSGIServer,
            handler_class=_QuietHandler,
        )
        self.port = self._server.server_port
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="metrics-http",
            daemon=True,
        )
        self._thread.start()
        self.log.info("Serving metrics on http://%s:%d%s", self.host or "0.0.0.0", self.port, METRICS_PATH)
        return self.port

    def shutdown(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
