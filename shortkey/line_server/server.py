"""TCP listener for the registration protocol."""

import logging
import socket
import threading
from typing import Optional, Tuple

from ..lib.store import URLStore
from .protocol import handle_line, read_request_line


class RegistrationServer:
    """Accept loop that hands each connection to its own thread.

    The listening socket is bound in the constructor, so a port that is
    already taken fails fast with ``OSError`` before anything is started.

    Example::

        server = RegistrationServer(store, port=1337)
        server.serve_forever()  # Blocks until shutdown()
    """

    # accept() wakes up this often to notice shutdown()
    POLL_INTERVAL = 0.5

    def __init__(
        self,
        store: URLStore,
        host: str = "0.0.0.0",
        port: int = 1337,
        backlog: int = 128,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize and bind the registration server.

        Args:
            store: Store that receives registrations
            host: Address to bind
            port: Port to bind (0 picks a free port)
            backlog: Listen queue size
            logger: Optional logger

        Raises:
            OSError: If the address cannot be bound
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

        self._socket = self._create_socket(host, port, backlog)
        self._address: Tuple[str, int] = self._socket.getsockname()[:2]

        self._stop_requested = threading.Event()
        self._stopped = threading.Event()
        self._serving_thread: Optional[threading.Thread] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def server_address(self) -> Tuple[str, int]:
        """The bound (host, port)."""
        return self._address

    @property
    def is_running(self) -> bool:
        return self._serving_thread is not None and not self._stopped.is_set()

    def _create_socket(self, host: str, port: int, backlog: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
        except OSError as e:
            sock.close()
            self.logger.error(f"Failed to bind to {host}:{port}: {e}")
            raise
        sock.settimeout(self.POLL_INTERVAL)
        return sock

    def serve_forever(self) -> None:
        """Accept connections until :meth:`shutdown` is called."""
        self._serving_thread = threading.current_thread()

        host, port = self._address
        self.logger.info(f"Listening for registrations on {host}:{port}")

        try:
            while not self._stop_requested.is_set():
                try:
                    conn, address = self._socket.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if self._stop_requested.is_set():
                        break
                    self.logger.warning(f"Accept error: {e}")
                    continue

                handler = threading.Thread(
                    target=self._handle_connection,
                    args=(conn, address),
                    name=f"register-{address[0]}:{address[1]}",
                    daemon=True,
                )
                handler.start()
        finally:
            self._close()
            self._stopped.set()
            self.logger.info("Registration server stopped")

    def start_in_thread(self) -> threading.Thread:
        """Run :meth:`serve_forever` on a daemon thread and return it."""
        self._thread = threading.Thread(
            target=self.serve_forever,
            name="registration-accept",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def shutdown(self, timeout: Optional[float] = 5.0) -> None:
        """Stop accepting connections and close the listening socket.

        Connections already being handled run to completion. Safe to call
        more than once, and from any thread.

        Args:
            timeout: Seconds to wait for the accept loop to exit
        """
        self._stop_requested.set()

        started = self._serving_thread is not None or (
            self._thread is not None and self._thread.is_alive()
        )
        if not started:
            self._close()
        elif threading.current_thread() is not self._serving_thread:
            self._stopped.wait(timeout)

    def _close(self) -> None:
        try:
            self._socket.close()
        except OSError:
            pass

    def _handle_connection(self, conn: socket.socket, address: Tuple[str, int]) -> None:
        peer = f"{address[0]}:{address[1]}"
        with conn:
            conn.settimeout(None)
            try:
                with conn.makefile("rb") as stream:
                    line = read_request_line(stream)
                reply = handle_line(self.store, line, self.logger)
                conn.sendall(reply.encode("utf-8"))
            except OSError as e:
                self.logger.debug(f"Connection from {peer} failed: {e}")
