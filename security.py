"""
Requester identity and the ownership check for mutating routes.

Bearer tokens are compact JWTs (HS256) built from the standard library:
``header.payload.signature``, each part base64url encoded without padding.
The ``sub`` claim carries the user id; the role is always read from the
``users`` table so that role changes apply to tokens already issued.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from errors import ErrorResponse
from models import User

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Requester:
    """Authenticated identity attached to a request."""

    id: str
    role: str


def allow(owner_id: str, requester_id: str, role: str) -> bool:
    """Return True when the requester owns the record or is an admin."""
    return owner_id == requester_id or role == ADMIN_ROLE


def is_admin(role: str) -> bool:
    return role == ADMIN_ROLE


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed token for ``data``.

    ``expires_delta`` is the lifetime in seconds and defaults to
    ``settings.access_token_expire_minutes``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify the signature and expiry of ``token`` and return its claims.

    Returns None for malformed, forged or expired tokens.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, settings.secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if int(data["exp"]) < int(time.time()):
            return None
    except (ValueError, TypeError, KeyError):
        return None
    return data


security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db),
) -> Requester:
    """Resolve the bearer token on the request to a ``Requester``."""
    if credentials is None:
        raise ErrorResponse("Not authorized to access this route", 401)

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise ErrorResponse("Not authorized to access this route", 401)

    # The subject may have been deleted since the token was issued.
    user = await session.get(User, payload["sub"])
    if user is None:
        raise ErrorResponse("Not authorized to access this route", 401)
    return Requester(id=user.id, role=user.role)
