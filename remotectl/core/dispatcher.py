"""Routes a logical command to the single transport registered for a mode."""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future

from remotectl.core.errors import DispatchError
from remotectl.core.model import DispatchResult, RemoteConfig, TransportMode
from remotectl.transports.base import Transport


class TransportDispatcher:
    def __init__(self, transports: Iterable[Transport]) -> None:
        self._transports: dict[TransportMode, Transport] = {}
        for transport in transports:
            if transport.mode in self._transports:
                raise DispatchError(f"Duplicate transport registered for mode '{transport.mode.value}'")
            self._transports[transport.mode] = transport

    @property
    def modes(self) -> tuple[TransportMode, ...]:
        return tuple(self._transports)

    def dispatch(self, mode: TransportMode | str, config: RemoteConfig, command: str) -> Future[DispatchResult]:
        try:
            mode = TransportMode(mode)
        except ValueError:
            raise DispatchError(f"Unknown transport mode '{mode}'") from None
        transport = self._transports.get(mode)
        if transport is None:
            raise DispatchError(f"No transport registered for mode '{mode.value}'")
        return transport.send(command, config)
