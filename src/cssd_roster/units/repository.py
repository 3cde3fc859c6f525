from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Unit


class UnitRepository(Protocol):
    def list_active(self) -> Sequence[Unit]:
        raise NotImplementedError

    def get_by_id(self, unit_id: int) -> Optional[Unit]:
        raise NotImplementedError
