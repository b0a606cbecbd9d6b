"""Short-lived scoped tokens guarding upload endpoints and comment submission."""

import time
from enum import Enum
from typing import Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from src.domain.exceptions import BadTokenError


class TokenScope(str, Enum):
    """What a token authorizes."""

    UPLOAD = "upload"
    COMMENT_SUBMIT = "comment_submit"


class UploadTokenService:
    """Issues and verifies HMAC-signed JWTs carrying a single scope.

    Tokens are bound to a subject (user ID, or the anonymous marker for
    guests) and expire after ``ttl_seconds``.
    """

    ANONYMOUS_SUBJECT = "anonymous"

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 12 * 3600,
    ) -> None:
        if not secret:
            msg = "Token secret must not be empty"
            raise ValueError(msg)
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(
        self,
        scope: TokenScope,
        subject: str | None = None,
        now: float | None = None,
    ) -> str:
        """Issue a token for one scope.

        Args:
            scope: Scope embedded in the token.
            subject: User identifier; None for guests.
            now: Issue time as a Unix timestamp (defaults to current time).

        Returns:
            Encoded JWT.
        """
        issued_at = int(now if now is not None else time.time())
        payload: dict[str, Any] = {
            "sub": subject or self.ANONYMOUS_SUBJECT,
            "scope": scope.value,
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None, scope: TokenScope) -> dict[str, Any]:
        """Verify a token and check its scope.

        Args:
            token: Encoded JWT from the request.
            scope: Scope the caller requires.

        Returns:
            Decoded claims.

        Raises:
            BadTokenError: If the token is missing, expired, malformed or
                carries a different scope.
        """
        if not token:
            raise BadTokenError("missing token")

        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": True, "require": ["exp", "scope"]},
            )
        except ExpiredSignatureError as e:
            raise BadTokenError("token expired") from e
        except InvalidTokenError as e:
            raise BadTokenError(f"invalid token: {e}") from e

        if claims.get("scope") != scope.value:
            raise BadTokenError("token scope mismatch")
        return claims

    def is_valid(self, token: str | None, scope: TokenScope) -> bool:
        """Boolean form of verify() for callers that must not raise."""
        try:
            self.verify(token, scope)
        except BadTokenError:
            return False
        return True
