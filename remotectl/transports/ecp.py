"""Roku External Control Protocol (ECP) key-press transport over HTTP."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

import requests

from remotectl.core.command_table import CommandTable
from remotectl.core.model import DispatchResult, KeypressResult, Outcome, RemoteConfig, TransportMode
from remotectl.transports.base import completed

ECP_PORT = 8060
CONNECT_TIMEOUT_S = 2.0
READ_TIMEOUT_S = 2.0
LOGGER = logging.getLogger(__name__)


def keypress_url(host: str, key: str) -> str:
    return f"http://{host}:{ECP_PORT}/keypress/{key}"


class EcpClient:
    """Stateless ECP client.

    Every call opens its own connection on its own thread: there is no session,
    queue, retry, or de-duplication of overlapping presses.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight: set[threading.Thread] = set()

    def send_keypress(self, host: str, key: str) -> KeypressResult:
        url = keypress_url(host, key)
        try:
            response = requests.post(
                url,
                data=b"",
                timeout=(CONNECT_TIMEOUT_S, READ_TIMEOUT_S),
            )
        except requests.RequestException as exc:
            return KeypressResult(ok=False, url=url, detail=f"{type(exc).__name__}: {exc}")

        if 200 <= response.status_code <= 299:
            return KeypressResult(ok=True, url=url, status_code=response.status_code)
        return KeypressResult(
            ok=False,
            url=url,
            status_code=response.status_code,
            detail=f"HTTP {response.status_code}",
        )

    def send_keypress_async(self, host: str, key: str) -> Future[KeypressResult]:
        future: Future[KeypressResult] = Future()
        # Running futures cannot be cancelled; the request goes out regardless.
        future.set_running_or_notify_cancel()

        def _run() -> None:
            try:
                future.set_result(self.send_keypress(host, key))
            except Exception as exc:
                future.set_exception(exc)
            finally:
                with self._lock:
                    self._in_flight.discard(threading.current_thread())

        thread = threading.Thread(target=_run, name=f"ecp-{key}", daemon=True)
        with self._lock:
            self._in_flight.add(thread)
        thread.start()
        return future

    def in_flight(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def close(self, timeout: float | None = None) -> None:
        """Wait for presses still on the wire; new presses remain allowed."""
        with self._lock:
            pending = list(self._in_flight)
        for thread in pending:
            thread.join(timeout)


class NetworkTransport:
    mode = TransportMode.NETWORK

    def __init__(self, table: CommandTable, client: EcpClient | None = None) -> None:
        self.table = table
        self.client = client or EcpClient()

    def send(self, command: str, config: RemoteConfig) -> Future[DispatchResult]:
        host = (config.host or "").strip()
        if not host:
            LOGGER.debug("No ECP host configured; not sending %s", command)
            return completed(DispatchResult(command=command, mode=self.mode, outcome=Outcome.NO_HOST))

        key = self.table.lookup_network_key(command)
        if key is None:
            LOGGER.debug("Command %s has no ECP key in table '%s'", command, self.table.id)
            return completed(DispatchResult(command=command, mode=self.mode, outcome=Outcome.NOT_MAPPED))

        result: Future[DispatchResult] = Future()
        result.set_running_or_notify_cancel()

        def _finish(pending: Future[KeypressResult]) -> None:
            exc = pending.exception()
            if exc is not None:
                result.set_exception(exc)
                return
            keypress = pending.result()
            if keypress.ok:
                LOGGER.debug("ECP %s -> %s", keypress.url, keypress.status_code)
                result.set_result(DispatchResult(command=command, mode=self.mode, outcome=Outcome.SENT))
            else:
                LOGGER.warning("ECP keypress %s failed: %s", keypress.url, keypress.detail)
                result.set_result(
                    DispatchResult(
                        command=command,
                        mode=self.mode,
                        outcome=Outcome.TRANSPORT_FAILURE,
                        detail=keypress.detail,
                    )
                )

        self.client.send_keypress_async(host, key).add_done_callback(_finish)
        return result
