from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from remotectl.core import nec
from remotectl.core.command_table import load_command_table
from remotectl.core.errors import EmitterError
from remotectl.core.model import Outcome, RemoteConfig, TransportMode
from remotectl.transports import infrared
from remotectl.transports.infrared import InfraredTransport, IrCtlEmitter, IrTransmitter


class FakeEmitter:
    def __init__(self, present: bool = True, error: Exception | None = None) -> None:
        self.present = present
        self.error = error
        self.calls: list[tuple[int, tuple[int, ...]]] = []

    def has_emitter(self) -> bool:
        return self.present

    def transmit(self, frequency_hz: int, pattern: Sequence[int]) -> None:
        self.calls.append((frequency_hz, tuple(pattern)))
        if self.error is not None:
            raise self.error


def test_infrared_transport_sends_encoded_frame_at_38khz() -> None:
    emitter = FakeEmitter()
    transport = InfraredTransport(load_command_table(), emitter)

    result = transport.send("Power", RemoteConfig()).result()

    assert result.ok
    assert result.mode is TransportMode.INFRARED
    assert emitter.calls == [(38000, nec.encode(0x10, 0x0C))]


def test_infrared_transport_without_emitter() -> None:
    emitter = FakeEmitter(present=False)
    transport = InfraredTransport(load_command_table(), emitter)

    result = transport.send("Power", RemoteConfig()).result()

    assert result.outcome is Outcome.NO_EMITTER
    assert emitter.calls == []


def test_infrared_transport_unmapped_command_makes_no_transmit() -> None:
    emitter = FakeEmitter()
    transport = InfraredTransport(load_command_table(), emitter)

    result = transport.send("Home", RemoteConfig()).result()

    assert result.outcome is Outcome.NOT_MAPPED
    assert emitter.calls == []


def test_transmitter_surfaces_driver_message() -> None:
    transmitter = IrTransmitter(FakeEmitter(error=EmitterError("device busy")))
    assert transmitter.transmit(38000, nec.encode(1, 2)) == (Outcome.TRANSPORT_FAILURE, "device busy")


def test_transmitter_failure_without_message() -> None:
    transmitter = IrTransmitter(FakeEmitter(error=OSError()))
    assert transmitter.transmit(38000, nec.encode(1, 2)) == (Outcome.TRANSPORT_FAILURE, None)


def test_infrared_transport_failure_result() -> None:
    transport = InfraredTransport(load_command_table(), FakeEmitter(error=EmitterError("device busy")))

    result = transport.send("VolumeUp", RemoteConfig()).result()

    assert result.outcome is Outcome.TRANSPORT_FAILURE
    assert result.detail == "device busy"


def test_ir_ctl_emitter_presence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    device = tmp_path / "lirc0"
    device.touch()

    monkeypatch.setattr(infrared.shutil, "which", lambda name: "/usr/bin/ir-ctl")
    assert IrCtlEmitter(str(device)).has_emitter() is True
    assert IrCtlEmitter(str(tmp_path / "missing")).has_emitter() is False

    monkeypatch.setattr(infrared.shutil, "which", lambda name: None)
    assert IrCtlEmitter(str(device)).has_emitter() is False


def test_ir_ctl_emitter_invokes_ir_ctl(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        captured["cmd"] = cmd
        send_arg = next(arg for arg in cmd if arg.startswith("--send="))
        captured["text"] = Path(send_arg.split("=", 1)[1]).read_text(encoding="utf-8")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr(infrared.subprocess, "run", fake_run)

    pattern = nec.encode(0x10, 0x0C)
    IrCtlEmitter("/dev/lirc1").transmit(38000, pattern)

    cmd = captured["cmd"]
    assert isinstance(cmd, list)
    assert cmd[:3] == ["ir-ctl", "-d", "/dev/lirc1"]
    assert "--carrier=38000" in cmd
    assert captured["text"] == nec.to_pulse_space_text(pattern)


def test_ir_ctl_emitter_nonzero_exit_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="cannot open /dev/lirc0")

    monkeypatch.setattr(infrared.subprocess, "run", fake_run)

    with pytest.raises(EmitterError, match="cannot open /dev/lirc0"):
        IrCtlEmitter().transmit(38000, nec.encode(0x10, 0x0C))


def test_ir_ctl_emitter_missing_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("ir-ctl")

    monkeypatch.setattr(infrared.subprocess, "run", fake_run)

    with pytest.raises(EmitterError):
        IrCtlEmitter().transmit(38000, nec.encode(0x10, 0x0C))
