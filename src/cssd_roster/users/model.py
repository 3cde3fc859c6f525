from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a CSSD employee account.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    nip: str
    name: str
    email: str
    password_hash: str
    role: Role
    position: Optional[str] = None
    is_active: bool = True
