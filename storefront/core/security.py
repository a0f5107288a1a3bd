"""Authentication helpers: JWT issuing and the identity resolution strategies."""
from __future__ import annotations

import binascii
import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from storefront.config import settings
from storefront.core.exceptions import UnauthorizedError

ALGORITHM = "HS256"
ROLES = ("admin", "seller", "customer")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _secret_key() -> str:
    return settings.secret_key.get_secret_value()


def hash_password(password: str, salt_hex: str, iterations: int = 210000) -> str:
    """Create pbkdf2_sha256 hash string."""
    dk = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), iterations
    )
    digest_hex = binascii.hexlify(dk).decode("ascii")
    return f"pbkdf2_sha256${iterations}${salt_hex}${digest_hex}"


def verify_password(password: str, encoded_hash: str) -> bool:
    """Verify pbkdf2_sha256 hash format: pbkdf2_sha256$iters$salt_hex$digest_hex."""
    try:
        algorithm, iter_str, salt_hex, _ = encoded_hash.split("$", 3)
        if algorithm != "pbkdf2_sha256":
            return False
        expected = hash_password(password, salt_hex=salt_hex, iterations=int(iter_str))
        return hmac.compare_digest(expected, encoded_hash)
    except ValueError:
        return False


@dataclass(frozen=True)
class Identity:
    id: str
    role: str
    email: Optional[str] = None

    @property
    def reviewer_label(self) -> str:
        return self.email or self.id


def create_access_token(identity: Identity, ttl_minutes: int | None = None) -> str:
    if identity.role not in ROLES:
        raise ValueError(f"Unknown role: {identity.role}")
    ttl = ttl_minutes if ttl_minutes is not None else settings.token_ttl_minutes
    payload: Dict[str, Any] = {
        "sub": identity.id,
        "role": identity.role,
        "iat": int(now_utc().timestamp()),
        "exp": int((now_utc() + timedelta(minutes=ttl)).timestamp()),
    }
    if identity.email:
        payload["email"] = identity.email
    return jwt.encode(payload, _secret_key(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, _secret_key(), algorithms=[ALGORITHM])


def identity_from_token(token: str) -> Identity | None:
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        return None
    subject = str(payload.get("sub") or "").strip()
    role = payload.get("role")
    if not subject or role not in ROLES:
        return None
    return Identity(id=subject, role=role, email=payload.get("email"))


class BearerTokenAuth:
    """Token from an ``Authorization: Bearer <jwt>`` header."""

    def __init__(self) -> None:
        self.scheme = HTTPBearer(auto_error=False)

    async def extract_token(self, request: Request) -> str | None:
        creds: HTTPAuthorizationCredentials | None = await self.scheme(request)
        if creds is None or not creds.credentials:
            return None
        return creds.credentials


class SessionCookieAuth:
    """Token from the signed session cookie."""

    def __init__(self, cookie_name: str) -> None:
        self.scheme = APIKeyCookie(name=cookie_name, auto_error=False)

    async def extract_token(self, request: Request) -> str | None:
        return await self.scheme(request)


class AuthResolver:
    """Uses the first strategy that finds a token on the request."""

    def __init__(self, strategies: list) -> None:
        self.strategies = strategies

    async def current_identity(self, request: Request) -> Identity | None:
        for strategy in self.strategies:
            token = await strategy.extract_token(request)
            if token:
                return identity_from_token(token)
        return None


auth_resolver = AuthResolver(
    [BearerTokenAuth(), SessionCookieAuth(settings.session_cookie_name)]
)


async def get_optional_identity(request: Request) -> Identity | None:
    return await auth_resolver.current_identity(request)


def get_current_identity(
    identity: Identity | None = Depends(get_optional_identity),
) -> Identity:
    if identity is None:
        raise UnauthorizedError("Unauthorized")
    return identity


def require_seller(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != "seller":
        raise UnauthorizedError("Unauthorized")
    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if identity.role != "admin":
        raise UnauthorizedError("Unauthorized")
    return identity
