"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from remotectl.api import Remote
from remotectl.core import nec
from remotectl.core.command_table import load_command_table
from remotectl.core.errors import RemotectlError
from remotectl.core.model import TransportMode
from remotectl.transports.infrared import DEFAULT_LIRC_DEVICE, IrCtlEmitter

app = typer.Typer(help="TV remote control over NEC infrared or Roku ECP")

TableOption = typer.Option(None, "--table", help="Command table YAML (defaults to the packaged table)")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_remote(
    *,
    table: Path | None,
    mode: TransportMode,
    host: str | None,
    lirc_device: str,
) -> Remote:
    return Remote(
        table=load_command_table(table),
        emitter=IrCtlEmitter(lirc_device),
        mode=mode,
        host=host,
    )


def _parse_byte(value: str, *, name: str) -> int:
    try:
        parsed = int(value, 0)
    except ValueError:
        raise RemotectlError(f"{name} must be an integer, got '{value}'") from None
    if not 0 <= parsed <= 0xFF:
        raise RemotectlError(f"{name} must be within 0..255, got {parsed}")
    return parsed


@app.command("commands")
def list_commands(table: Path | None = TableOption) -> None:
    """List logical commands with their infrared and network mappings."""
    try:
        loaded = load_command_table(table)
        typer.echo(f"{loaded.id}: {loaded.name}")
        for name in loaded.names():
            code = loaded.lookup_ir(name)
            ir = f"0x{code.device:02X}/0x{code.command:02X}" if code else "-"
            key = loaded.lookup_network_key(name) or "-"
            typer.echo(f"  {name}: ir={ir} network={key}")
    except RemotectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("press")
def press(
    command: str,
    mode: TransportMode = typer.Option(TransportMode.NETWORK, "--mode", help="Transport to use"),
    host: str | None = typer.Option(None, "--host", envvar="REMOTECTL_HOST", help="Roku host for network mode"),
    lirc_device: str = typer.Option(
        DEFAULT_LIRC_DEVICE,
        "--lirc-device",
        envvar="REMOTECTL_LIRC_DEVICE",
        help="LIRC device node for infrared mode",
    ),
    table: Path | None = TableOption,
) -> None:
    """Press COMMAND once using the selected transport."""
    try:
        with _build_remote(table=table, mode=mode, host=host, lirc_device=lirc_device) as remote:
            result = remote.invoke(command).result()
    except RemotectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not result.ok:
        suffix = f": {result.detail}" if result.detail else ""
        typer.echo(f"Error: {result.outcome.value} for {command} via {result.mode.value}{suffix}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Sent {command} via {result.mode.value}")


@app.command("encode")
def encode(device: str, command: str) -> None:
    """Print the NEC burst pattern for DEVICE and COMMAND bytes (e.g. 0x10 0x0C)."""
    try:
        device_byte = _parse_byte(device, name="DEVICE")
        command_byte = _parse_byte(command, name="COMMAND")
    except RemotectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    pattern = nec.encode(device_byte, command_byte)
    code = nec.decode(pattern)
    typer.echo(
        f"NEC device=0x{code.device:02X} command=0x{code.command:02X} "
        f"carrier={nec.NEC_CARRIER_HZ}Hz entries={len(pattern)}"
    )
    typer.echo(",".join(str(v) for v in pattern))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
