import base64
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from pwdlib import PasswordHash

from .errors import InvalidToken
from .models import User

logger = logging.getLogger(__name__)


def generate_secret(num_bytes: int = 32) -> str:
    """Return a random base64 key, long enough for HS256."""
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")


class PasswordHasher:
    def __init__(self, password_hash: Optional[PasswordHash] = None):
        self._hash = password_hash or PasswordHash.recommended()
        # target for dummy_verify, so an unknown email costs exactly one verify
        self._dummy_hash = self._hash.hash(secrets.token_urlsafe(16))

    def hash(self, password: str) -> str:
        return self._hash.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._hash.verify(password, password_hash)

    def dummy_verify(self, password: str) -> None:
        self._hash.verify(password, self._dummy_hash)


class TokenService:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        now = self._clock()
        payload: Dict[str, Any] = {
            "sub": user.email,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidToken()
        return subject
