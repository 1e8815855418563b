"""Fixed credential list and authentication for LeadDesk users."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from backend.app.core.security import verify_password

logger = logging.getLogger("leaddesk.identity")


class Role(str, Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


@dataclass(frozen=True)
class Identity:
    username: str
    role: Role


@dataclass(frozen=True)
class Credential:
    username: str
    password_hash: str
    role: Role


class IdentityProvider:
    """Authenticates against an externally provisioned credential list."""

    def __init__(self, credentials: Iterable[Credential]):
        self._credentials = {c.username: c for c in credentials}

    def authenticate(self, username: str, password: str) -> Optional[Identity]:
        credential = self._credentials.get(username)
        if credential is None or not verify_password(password, credential.password_hash):
            # Same outcome for unknown user and wrong password
            logger.warning("Failed login attempt for %r", username)
            return None
        return Identity(username=credential.username, role=credential.role)

    def lookup(self, username: str) -> Optional[Identity]:
        credential = self._credentials.get(username)
        if credential is None:
            return None
        return Identity(username=credential.username, role=credential.role)

    def usernames(self, role: Role | None = None) -> list[str]:
        return [c.username for c in self._credentials.values() if role is None or c.role == role]
