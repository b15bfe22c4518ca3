"""Infrared transport backed by the Linux LIRC `ir-ctl` tool."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from concurrent.futures import Future
from pathlib import Path
from typing import Protocol

from remotectl.core import nec
from remotectl.core.command_table import CommandTable
from remotectl.core.errors import EmitterError
from remotectl.core.model import DispatchResult, Outcome, RemoteConfig, TransportMode
from remotectl.transports.base import completed

DEFAULT_LIRC_DEVICE = "/dev/lirc0"
LOGGER = logging.getLogger(__name__)


class IrEmitter(Protocol):
    def has_emitter(self) -> bool:
        """Report whether an infrared transmitter is available."""

    def transmit(self, frequency_hz: int, pattern: Sequence[int]) -> None:
        """Emit an on/off microsecond pattern; raise EmitterError on failure."""


class IrCtlEmitter:
    def __init__(self, device: str = DEFAULT_LIRC_DEVICE) -> None:
        self.device = device

    def has_emitter(self) -> bool:
        return Path(self.device).exists() and shutil.which("ir-ctl") is not None

    def transmit(self, frequency_hz: int, pattern: Sequence[int]) -> None:
        with tempfile.TemporaryDirectory(prefix="remotectl_tx_") as tmpdir:
            path = os.path.join(tmpdir, "frame.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write(nec.to_pulse_space_text(pattern))

            cmd = [
                "ir-ctl",
                "-d",
                self.device,
                f"--carrier={int(frequency_hz)}",
                f"--send={path}",
            ]
            try:
                proc = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError as exc:
                raise EmitterError("ir-ctl is not installed") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            stdout = (proc.stdout or "").strip()
            raise EmitterError(f"ir-ctl send failed (code={proc.returncode}): {stderr or stdout}")


class IrTransmitter:
    """Hands patterns to the emitter and folds driver failures into a result."""

    def __init__(self, emitter: IrEmitter) -> None:
        self.emitter = emitter

    def transmit(self, frequency_hz: int, pattern: Sequence[int]) -> tuple[Outcome, str | None]:
        try:
            self.emitter.transmit(frequency_hz, pattern)
        except (EmitterError, OSError) as exc:
            return Outcome.TRANSPORT_FAILURE, str(exc) or None
        return Outcome.SENT, None


class InfraredTransport:
    mode = TransportMode.INFRARED

    def __init__(self, table: CommandTable, emitter: IrEmitter | None = None) -> None:
        self.table = table
        self.emitter = emitter or IrCtlEmitter()
        self.transmitter = IrTransmitter(self.emitter)

    def send(self, command: str, config: RemoteConfig) -> Future[DispatchResult]:
        if not self.emitter.has_emitter():
            LOGGER.debug("No infrared emitter available; not sending %s", command)
            return completed(DispatchResult(command=command, mode=self.mode, outcome=Outcome.NO_EMITTER))

        code = self.table.lookup_ir(command)
        if code is None:
            LOGGER.debug("Command %s has no infrared code in table '%s'", command, self.table.id)
            return completed(DispatchResult(command=command, mode=self.mode, outcome=Outcome.NOT_MAPPED))

        pattern = nec.encode(code.device, code.command)
        outcome, detail = self.transmitter.transmit(nec.NEC_CARRIER_HZ, pattern)
        if outcome is Outcome.SENT:
            LOGGER.debug("IR %s sent as 0x%02X/0x%02X", command, code.device, code.command)
        else:
            LOGGER.warning("IR transmit of %s failed: %s", command, detail)
        return completed(DispatchResult(command=command, mode=self.mode, outcome=outcome, detail=detail))
