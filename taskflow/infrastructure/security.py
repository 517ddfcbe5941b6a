"""Credentials — password hashing, JWT access tokens and opaque refresh tokens.

Invariants:
    - Password hashes use the format pbkdf2:sha256:{iterations}${salt}${hex}
    - Hash comparison is constant-time (hmac.compare_digest)
    - Access tokens are HS256 JWTs with sub=user id, email, iss, aud, iat, exp
    - read_user_id() returns None for any invalid token; it never raises
    - verify_expiry=False still checks signature, issuer and audience (refresh flow)

Design Decisions:
    - PyJWT over a hand-rolled HMAC token: standard claims validation
    - Refresh tokens are random (secrets.token_urlsafe), stored on the user row
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
HASH_PREFIX = "pbkdf2:sha256:"


def hash_password(password: str, iterations: int = 120_000) -> str:
    """Hash a password using PBKDF2-SHA256."""
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{HASH_PREFIX}{iterations}${salt}${dk.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    if not password_hash or not password_hash.startswith(HASH_PREFIX):
        return False
    parts = password_hash.split("$")
    if len(parts) != 3:
        return False
    header, salt, stored_hash = parts
    try:
        iterations = int(header.split(":")[2])
    except (IndexError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return hmac.compare_digest(dk.hex(), stored_hash)


class JwtTokenService:
    """TokenService implementation backed by PyJWT."""

    def __init__(
        self, secret: str, issuer: str, audience: str,
        access_token_minutes: int = 60, hash_iterations: int = 120_000,
    ):
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._access_token_minutes = access_token_minutes
        self._hash_iterations = hash_iterations

    @classmethod
    def from_settings(cls, settings) -> "JwtTokenService":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            access_token_minutes=settings.access_token_expire_minutes,
            hash_iterations=settings.password_hash_iterations,
        )

    def issue_access_token(self, user_id: UUID, email: str) -> tuple[str, int]:
        """Return (token, expires_in_seconds)."""
        now = datetime.now(timezone.utc)
        lifetime = timedelta(minutes=self._access_token_minutes)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
            "jti": secrets.token_hex(8),
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return token, int(lifetime.total_seconds())

    def read_user_id(self, token: str, *, verify_expiry: bool = True) -> UUID | None:
        try:
            payload = jwt.decode(
                token, self._secret,
                algorithms=[JWT_ALGORITHM],
                issuer=self._issuer,
                audience=self._audience,
                options={"verify_exp": verify_expiry},
            )
            return UUID(payload["sub"])
        except jwt.ExpiredSignatureError:
            logger.debug("JWT expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid JWT: {e}")
            return None
        except (KeyError, ValueError):
            logger.debug("JWT subject missing or malformed")
            return None

    def new_refresh_token(self) -> str:
        return secrets.token_urlsafe(48)

    def hash_password(self, password: str) -> str:
        return hash_password(password, self._hash_iterations)

    def verify_password(self, password: str, password_hash: str) -> bool:
        return verify_password(password, password_hash)
