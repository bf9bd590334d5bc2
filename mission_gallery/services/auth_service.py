import logging
from dataclasses import dataclass
from typing import Optional

from mission_gallery.metadata.index import MetadataIndex


logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_GUEST = "guest"


@dataclass
class LoginResult:
    username: str
    role: str


class AuthService:
    """Plaintext credential checks against the metadata index."""

    def __init__(self, index: MetadataIndex):
        self.index = index

    async def _match_admin(self, username: str, password: str) -> bool:
        return any(
            user["username"] == username and user["password"] == password for user in await self.index.admin_users()
        )

    async def login(self, username: str, password: str, role: str) -> Optional[LoginResult]:
        if not username or not password:
            return None

        if role == ROLE_ADMIN:
            if await self._match_admin(username, password):
                logger.info(f"Admin login for {username}")
                return LoginResult(username=username, role=ROLE_ADMIN)
            logger.info(f"Rejected admin login for {username}")
            return None

        # guests pick their own display name; the password is the shared secret
        if await self.index.is_guest_password(password):
            logger.info(f"Guest login as {username}")
            return LoginResult(username=username, role=ROLE_GUEST)
        if await self._match_admin(username, password):
            logger.info(f"Admin login for {username} through guest form")
            return LoginResult(username=username, role=ROLE_ADMIN)

        logger.info(f"Rejected guest login for {username}")
        return None
