"""Transport interfaces."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

from remotectl.core.model import DispatchResult, RemoteConfig, TransportMode


class Transport(Protocol):
    mode: TransportMode

    def send(self, command: str, config: RemoteConfig) -> Future[DispatchResult]:
        """Deliver one logical command and resolve to a uniform result."""


def completed(result: DispatchResult) -> Future[DispatchResult]:
    future: Future[DispatchResult] = Future()
    future.set_result(result)
    return future
