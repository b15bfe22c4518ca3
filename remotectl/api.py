"""Stable public API for building remote-control frontends on top of remotectl.

This module is the supported integration surface for UI layers and scripts.
Avoid importing from internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from concurrent.futures import Future

from remotectl.core.command_table import CommandTable, load_command_table
from remotectl.core.dispatcher import TransportDispatcher
from remotectl.core.errors import (
    CommandTableLoadError,
    CommandTableValidationError,
    DispatchError,
    EmitterError,
    RemotectlError,
    TransportError,
)
from remotectl.core.model import (
    CommandEntry,
    DispatchResult,
    IrCode,
    KeypressResult,
    Outcome,
    RemoteConfig,
    TransportMode,
)
from remotectl.core.nec import NEC_CARRIER_HZ, decode, encode
from remotectl.transports.ecp import EcpClient, NetworkTransport
from remotectl.transports.infrared import InfraredTransport, IrCtlEmitter, IrEmitter

__all__ = [
    "RemotectlError",
    "CommandTableLoadError",
    "CommandTableValidationError",
    "DispatchError",
    "TransportError",
    "EmitterError",
    "CommandEntry",
    "CommandTable",
    "DispatchResult",
    "IrCode",
    "KeypressResult",
    "Outcome",
    "RemoteConfig",
    "TransportMode",
    "NEC_CARRIER_HZ",
    "encode",
    "decode",
    "load_command_table",
    "EcpClient",
    "IrCtlEmitter",
    "IrEmitter",
    "Remote",
]


class Remote:
    """Public remote for UI layers.

    A `Remote` owns the mutable mode/host state a frontend edits and turns each
    button press into one dispatch against an immutable configuration snapshot.
    """

    def __init__(
        self,
        *,
        table: CommandTable | None = None,
        emitter: IrEmitter | None = None,
        ecp_client: EcpClient | None = None,
        mode: TransportMode | str = TransportMode.NETWORK,
        host: str | None = None,
    ) -> None:
        self._table = table or load_command_table()
        self._ecp_client = ecp_client or EcpClient()
        self._dispatcher = TransportDispatcher(
            [
                InfraredTransport(self._table, emitter),
                NetworkTransport(self._table, self._ecp_client),
            ]
        )
        self._mode = TransportMode(mode)
        self._host: str | None = None
        self.set_host(host)

    @property
    def table(self) -> CommandTable:
        return self._table

    @property
    def mode(self) -> TransportMode:
        return self._mode

    @property
    def host(self) -> str | None:
        return self._host

    def set_mode(self, mode: TransportMode | str) -> None:
        self._mode = TransportMode(mode)

    def set_host(self, host: str | None) -> None:
        stripped = (host or "").strip()
        self._host = stripped or None

    def invoke(self, command: str) -> Future[DispatchResult]:
        return self._dispatcher.dispatch(self._mode, RemoteConfig(host=self._host), command)

    def close(self) -> None:
        self._ecp_client.close()

    def __enter__(self) -> Remote:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
