from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Unit:
    """Domain entity: a CSSD task station (dekontaminasi, packing, ...)."""

    unit_id: int
    code: str
    name: str
    description: Optional[str] = None
    color: str = "#3B82F6"
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.unit_id,
            "code": self.code,
            "name": self.name,
            "description": self.description or "",
            "color": self.color,
        }
