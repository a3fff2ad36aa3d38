"""Password hashing and JWT session token issuance/verification."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from sumbar_api.core.config import settings
from sumbar_api.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from sumbar_api.core.config import Settings

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

REQUIRED_CLAIMS = ("sub", "role", "iat", "exp")


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache
def dummy_password_hash() -> str:
    """Hash used to burn the same bcrypt time when a login names an unknown user."""
    return hash_password("unknown-user-placeholder")


class InvalidTokenError(Exception):
    """Raised when a session token is malformed, tampered with, or expired."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenService:
    """
    Issues and verifies signed, time-limited session tokens.

    Tokens are stateless: claims are sub (user id), role (role name), iat and exp.
    The signing key is fixed at construction; build one per process via from_settings.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440) -> None:
        if not secret or not secret.strip():
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, app_settings: "Settings") -> "TokenService":
        return cls(
            secret=app_settings.JWT_SECRET.get_secret_value(),
            algorithm=app_settings.JWT_ALGORITHM,
            expire_minutes=app_settings.JWT_EXPIRE_MINUTES,
        )

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, user_id: int, role: str, now: datetime | None = None) -> str:
        """Create a signed token for user_id carrying role, expiring after the configured lifetime."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token; return its claims.
        Raises InvalidTokenError on bad signature, malformed payload, or expiry.
        """
        if not token:
            raise InvalidTokenError("Token is empty")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Token rejected: {e}") from e

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token subject is not a user id") from e
        return TokenClaims(
            user_id=user_id,
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService.from_settings(settings)
