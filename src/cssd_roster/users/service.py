from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    role: Role
    position: Optional[str]

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "role": self.role.value, "position": self.position}


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, nip: str, password: str) -> SessionUser:
        user = self._users.get_by_nip((nip or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid NIP or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for nip=%s", user.nip)
            raise AuthenticationError("Invalid NIP or password")

        return SessionUser(user_id=user.user_id, name=user.name, role=user.role, position=user.position)
