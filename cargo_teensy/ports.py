"""USB serial discovery of connected Teensy boards."""

from __future__ import annotations

from dataclasses import dataclass

from serial.tools.list_ports import comports

# PJRC's USB vendor id, shared by every Teensy model
PJRC_VID = 0x16C0


@dataclass
class PortInfo:
    device: str
    description: str
    hwid: str


def list_teensy_ports() -> list[PortInfo]:
    """List serial ports that belong to a Teensy."""
    ports = []
    for p in comports():
        if getattr(p, "vid", None) != PJRC_VID:
            continue
        ports.append(PortInfo(
            device=p.device,
            description=p.description,
            hwid=p.hwid,
        ))
    return ports
