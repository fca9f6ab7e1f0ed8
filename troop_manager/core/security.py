# troop_manager/core/security.py
"""
Token issuing/verification and password hashing.

Access and refresh tokens are HS256 JWTs signed with two different secrets
and carry independent lifetimes. Nothing is persisted server-side: a token
stays valid until its `exp` passes.
"""

import time
from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError
from loguru import logger

from .exceptions import InvalidTokenError, TokenExpiredError, ValidationError


class TokenService:
    """Issues and verifies signed access/refresh tokens"""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(days=7),
        refresh_ttl: timedelta = timedelta(days=30),
        algorithm: str = "HS256",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(
            access_secret=settings.JWT_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            access_ttl=settings.access_token_ttl,
            refresh_ttl=settings.refresh_token_ttl,
            algorithm=settings.JWT_ALGORITHM,
        )

    def _issue(self, claims: Dict[str, Any], secret: str, ttl: timedelta) -> str:
        issued_at = int(time.time())
        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + int(ttl.total_seconds())
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        """
        Sign an access token

        Args:
            claims: Must contain userId and email

        Returns:
            Encoded JWT
        """
        return self._issue(
            {"userId": claims["userId"], "email": claims["email"]},
            self.access_secret,
            self.access_ttl,
        )

    def issue_refresh_token(self, claims: Dict[str, Any]) -> str:
        """Sign a refresh token carrying only the user id"""
        return self._issue({"userId": claims["userId"]}, self.refresh_secret, self.refresh_ttl)

    def issue_token_pair(self, user: Dict[str, Any]) -> Dict[str, str]:
        return {
            "accessToken": self.issue_access_token({"userId": user["id"], "email": user["email"]}),
            "refreshToken": self.issue_refresh_token({"userId": user["id"]}),
        }

    def verify(self, token: Optional[str], secret: str) -> Dict[str, Any]:
        """
        Decode and validate a token

        Args:
            token: Encoded JWT
            secret: Secret the token must be signed with

        Returns:
            The token claims, including iat and exp

        Raises:
            TokenExpiredError: If the expiry has elapsed
            InvalidTokenError: If the token is malformed or the signature is wrong
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Token missing or malformed")

        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as expired_error:
            raise TokenExpiredError() from expired_error
        except JOSEError as token_decode_error:
            raise InvalidTokenError(f"Unable to decode token: {token_decode_error}") from token_decode_error

        # A token is valid strictly before its exp
        expires_at = payload.get("exp")
        if expires_at is not None and expires_at <= int(time.time()):
            raise TokenExpiredError()

        return payload

    def verify_access_token(self, token: Optional[str]) -> Dict[str, Any]:
        return self.verify(token, self.access_secret)

    def verify_refresh_token(self, token: Optional[str]) -> Dict[str, Any]:
        return self.verify(token, self.refresh_secret)


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._placeholder_hash: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "PasswordHasher":
        return cls(rounds=settings.BCRYPT_ROUNDS)

    def hash(self, password: str) -> str:
        """
        Raises:
            ValidationError: If bcrypt rejects the password (over 72 bytes)
        """
        try:
            return bcrypt.hashpw(
                password.encode('utf-8'),
                bcrypt.gensalt(rounds=self.rounds)
            ).decode('utf-8')
        except ValueError as e:
            raise ValidationError(details=[{"field": "password", "message": str(e)}]) from e

    def verify(self, password: str, hashed_password: Optional[str]) -> bool:
        """Constant-time comparison (bcrypt.checkpw); False for a missing or malformed hash"""
        if not password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError as e:
            logger.warning(f"Password verification failed: {e}")
            return False

    def verify_placeholder(self, password: str) -> bool:
        """Run a full bcrypt check against a throwaway hash; used when there is no stored hash to compare"""
        if self._placeholder_hash is None:
            self._placeholder_hash = self.hash("placeholder-password")
        return self.verify(password, self._placeholder_hash)
