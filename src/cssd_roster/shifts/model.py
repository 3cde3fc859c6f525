from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class Shift:
    """Domain entity: a shift window (e.g. PAGI 07:00-14:00)."""

    shift_id: int
    code: str
    name: str
    start_time: time
    end_time: time
    color: str = "#10B981"
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "code": self.code,
            "name": self.name,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "color": self.color,
        }
