"""
JWT issuance and verification.

Tokens are HS256-signed compact JWTs carrying ``sub``, ``authorities``,
``iat`` and ``exp``. The signing secret is passed in explicitly so the
provider can be exercised with any key.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import jwt  # type: ignore[import]

from enums import ErrorCode
from security import BusinessError

MIN_SECRET_BYTES = 32
_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


class TokenProvider:
    def __init__(
        self,
        secret: str,
        expiration_seconds: int,
        *,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        if len((secret or "").encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(f"JWT secret must be at least {MIN_SECRET_BYTES} bytes")
        if int(expiration_seconds) <= 0:
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock
        self.expiration_seconds = int(expiration_seconds)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenProvider":
        return cls(
            config.get("JWT_SECRET", ""),
            int(config.get("JWT_EXP_SECONDS", 3600)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def generate_token(self, subject: str, authorities: Iterable[str]) -> str:
        now = self._clock()
        payload = {
            "sub": subject,
            "authorities": list(authorities),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.expiration_seconds)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str, *, verify_exp: bool = True) -> Dict[str, Any]:
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": _REQUIRED_CLAIMS, "verify_exp": verify_exp},
        )

    def decode(self, token: str) -> Dict[str, Any]:
        """Return verified claims; expired and corrupt tokens raise distinct codes."""
        try:
            return self._decode(token)
        except jwt.ExpiredSignatureError:
            raise BusinessError(ErrorCode.EXPIRED_TOKEN)
        except jwt.InvalidTokenError:
            raise BusinessError(ErrorCode.INVALID_TOKEN)

    def extract_subject(self, token: str) -> str:
        return self.decode(token)["sub"]

    def extract_authorities(self, token: str) -> List[str]:
        authorities = self.decode(token).get("authorities") or []
        return [str(item) for item in authorities]

    def inspect(self, token: str) -> TokenStatus:
        try:
            self._decode(token)
        except jwt.ExpiredSignatureError:
            return TokenStatus.EXPIRED
        except jwt.InvalidTokenError:
            return TokenStatus.INVALID
        return TokenStatus.VALID

    def is_valid(self, token: str, subject: Optional[str] = None) -> bool:
        try:
            claims = self._decode(token)
        except jwt.InvalidTokenError:
            return False
        return subject is None or claims.get("sub") == subject

    def has_valid_signature(self, token: str) -> bool:
        """Check the signature alone, so an expired token still reports True."""
        try:
            self._decode(token, verify_exp=False)
        except jwt.InvalidTokenError:
            return False
        return True
