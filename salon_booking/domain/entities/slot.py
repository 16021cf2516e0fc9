from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Slot:
    index: int
    time: str  # HH:MM
    reserved: bool = False
    startable: bool = True
