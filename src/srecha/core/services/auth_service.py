"""
Authentication service.

Passwords are stored as bcrypt hashes. Unknown users and wrong passwords
fail the same way, and both paths pay for one bcrypt check.
"""

import bcrypt
from pydantic import SecretStr

from srecha.config import get_logger
from srecha.core.entities.user import Principal, User
from srecha.core.exceptions import AuthError, ValidationError
from srecha.core.interfaces import IUserStore

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


class AuthService:
    """Credential checks and user bootstrap."""

    def __init__(self, user_store: IUserStore, bcrypt_rounds: int = 12):
        self._users = user_store
        self._rounds = bcrypt_rounds
        self._dummy_hash: bytes | None = None

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if not encoded or len(encoded) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password", f"must be between 1 and {MAX_PASSWORD_BYTES} bytes"
            )
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    async def login(self, username: str, password: str) -> Principal:
        """
        Check credentials.

        Returns:
            Principal of the authenticated user

        Raises:
            AuthError: Unknown user or wrong password
        """
        user = await self._users.get_by_username(username)
        encoded = password.encode("utf-8")

        if len(encoded) > MAX_PASSWORD_BYTES:
            verified = False
        elif user is None:
            bcrypt.checkpw(encoded, self._get_dummy_hash())
            verified = False
        else:
            verified = bcrypt.checkpw(encoded, user.password_hash.encode("ascii"))

        if not verified or user is None:
            logger.warning("login_failed", username=username)
            raise AuthError(username)

        logger.info("login_succeeded", username=username, user_id=user.id)
        return Principal(id=user.id, username=user.username, role=user.role)

    async def create_user(self, username: str, password: str, role: str = "admin") -> User:
        user = User(username=username, password_hash=self.hash_password(password), role=role)
        return await self._users.create_user(user)

    async def ensure_bootstrap_admin(
        self, username: str | None, password: SecretStr | None
    ) -> User | None:
        """Create the configured admin if no user exists yet."""
        if not username or password is None:
            return None
        if await self._users.count_users() > 0:
            return None

        user = await self.create_user(username, password.get_secret_value())
        logger.info("bootstrap_admin_created", username=username)
        return user

    def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"srecha", bcrypt.gensalt(rounds=self._rounds))
        return self._dummy_hash
