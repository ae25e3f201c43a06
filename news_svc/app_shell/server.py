"""
HttpServer - uvicorn on a background thread.

The listener reports a fatal error once through `notify()`; `shutdown()`
asks uvicorn to drain and waits up to the shutdown timeout before forcing
it to exit.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

import uvicorn

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 80
DEFAULT_SHUTDOWN_TIMEOUT = 5.0

# Extra wait for the thread after force_exit has been set.
_FORCE_EXIT_GRACE = 1.0


class HttpServer:
    def __init__(
        self,
        app: Any,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
    ) -> None:
        self.shutdown_timeout = shutdown_timeout
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_config=None,
            timeout_graceful_shutdown=max(int(shutdown_timeout), 1),
        )
        self._server = uvicorn.Server(config)
        self._notify: queue.Queue[Exception] = queue.Queue(maxsize=1)
        self._stopping = threading.Event()
        self._thread = threading.Thread(target=self._serve, name="http-server", daemon=True)

    def start(self) -> HttpServer:
        self._thread.start()
        return self

    def _serve(self) -> None:
        try:
            self._server.run()
        except Exception as e:
            self._notify.put_nowait(e)
            return
        # uvicorn exits via sys.exit when it cannot bind
        except SystemExit as e:
            self._notify.put_nowait(RuntimeError(f"http server exited with status {e.code}"))
            return
        if not self._stopping.is_set():
            self._notify.put_nowait(RuntimeError("http server stopped unexpectedly"))

    def notify(self) -> queue.Queue[Exception]:
        return self._notify

    def shutdown(self) -> None:
        """Stop gracefully; raise TimeoutError if the drain exceeds the timeout."""
        self._stopping.set()
        self._server.should_exit = True
        self._thread.join(self.shutdown_timeout)
        if not self._thread.is_alive():
            return

        self._server.force_exit = True
        self._thread.join(_FORCE_EXIT_GRACE)
        raise TimeoutError(
            f"http server did not stop within {self.shutdown_timeout:.1f}s"
        )
