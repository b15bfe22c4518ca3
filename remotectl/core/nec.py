"""NEC consumer-IR frame encoding.

An NEC frame is a 9 ms leader burst and 4.5 ms space, followed by 32 data bits
sent least-significant bit first (address, ~address, command, ~command), and a
single 560 us stop burst. Every bit starts with a 560 us burst; the length of the
following space carries the value.
"""

from __future__ import annotations

from collections.abc import Sequence

from remotectl.core.model import BurstPattern, IrCode

NEC_CARRIER_HZ = 38000

LEADER_MARK_US = 9000
LEADER_SPACE_US = 4500
BIT_MARK_US = 560
ZERO_SPACE_US = 560
ONE_SPACE_US = 1690
STOP_MARK_US = 560

FRAME_BITS = 32
FRAME_LENGTH = 2 + FRAME_BITS * 2 + 1


def _payload(device: int, command: int) -> int:
    device &= 0xFF
    command &= 0xFF
    return device | ((~device & 0xFF) << 8) | (command << 16) | ((~command & 0xFF) << 24)


def encode(device: int, command: int) -> BurstPattern:
    """Build the on/off microsecond durations for one NEC frame.

    Always returns FRAME_LENGTH entries starting with an "on" duration.
    """
    payload = _payload(device, command)

    bursts = [LEADER_MARK_US, LEADER_SPACE_US]
    for _ in range(FRAME_BITS):
        bursts.append(BIT_MARK_US)
        bursts.append(ONE_SPACE_US if payload & 1 else ZERO_SPACE_US)
        payload >>= 1
    bursts.append(STOP_MARK_US)

    return tuple(bursts)


def decode(pattern: Sequence[int]) -> IrCode | None:
    """Recover the address/command pair from a pattern produced by `encode`.

    Returns None unless the pattern has the exact NEC shape and both inverted
    bytes check out.
    """
    if len(pattern) != FRAME_LENGTH:
        return None
    if pattern[0] != LEADER_MARK_US or pattern[1] != LEADER_SPACE_US or pattern[-1] != STOP_MARK_US:
        return None

    payload = 0
    for i in range(FRAME_BITS):
        mark = pattern[2 + i * 2]
        space = pattern[3 + i * 2]
        if mark != BIT_MARK_US:
            return None
        if space == ONE_SPACE_US:
            payload |= 1 << i
        elif space != ZERO_SPACE_US:
            return None

    device = payload & 0xFF
    device_inv = (payload >> 8) & 0xFF
    command = (payload >> 16) & 0xFF
    command_inv = (payload >> 24) & 0xFF
    if device ^ device_inv != 0xFF or command ^ command_inv != 0xFF:
        return None
    return IrCode(device=device, command=command)


def to_pulse_space_text(pattern: Sequence[int]) -> str:
    # ir-ctl reads alternating "pulse"/"space" lines, starting and ending with a pulse.
    lines = [
        f"{'pulse' if i % 2 == 0 else 'space'} {int(duration)}"
        for i, duration in enumerate(pattern)
    ]
    return "\n".join(lines) + "\n"
