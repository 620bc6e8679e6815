# aula/app/security/jwt.py
"""
Session tokens.

A token is an HS256 JWT with the payload {user, iat, exp}. Nothing is stored
server side: a token is valid while its signature checks out and the clock
has not reached exp. There is no revocation and no renewal.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, JWTError
from pydantic import ValidationError

from aula.app.core.exceptions import InvalidTokenSignature, TokenExpired
from aula.app.schemas.user import TokenPayload

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=8),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("TokenService needs a signing secret")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.clock = clock or _utcnow

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        now = self.clock()
        expire = now + (expires_delta if expires_delta is not None else self.lifetime)
        to_encode.update({"iat": int(now.timestamp()), "exp": int(expire.timestamp())})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def issue(self, subject: str) -> str:
        return self.create_access_token({"user": subject})

    def verify(self, token: str) -> str:
        """
        Return the username the token was issued for.

        Raises:
            InvalidTokenSignature: malformed token, bad signature or payload
            TokenExpired: the current time is at or past exp
        """
        try:
            # Expiry is checked below against our own clock
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
            token_data = TokenPayload(**payload)
        except (JWTError, ValidationError, TypeError) as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenSignature() from exc

        if int(self.clock().timestamp()) >= token_data.exp:
            raise TokenExpired()

        return token_data.user
