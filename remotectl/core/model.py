"""Core data models shared by the encoder, transports, dispatcher, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BurstPattern = tuple[int, ...]


class TransportMode(str, Enum):
    INFRARED = "ir"
    NETWORK = "network"


class Outcome(str, Enum):
    SENT = "sent"
    NOT_MAPPED = "not_mapped"
    NO_HOST = "no_host"
    NO_EMITTER = "no_emitter"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(frozen=True)
class IrCode:
    device: int
    command: int


@dataclass(frozen=True)
class CommandEntry:
    ir: IrCode | None = None
    network_key: str | None = None


@dataclass(frozen=True)
class RemoteConfig:
    """Snapshot of caller configuration taken when a dispatch starts."""

    host: str | None = None


@dataclass(frozen=True)
class KeypressResult:
    ok: bool
    url: str
    status_code: int | None = None
    detail: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    command: str
    mode: TransportMode
    outcome: Outcome
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SENT
