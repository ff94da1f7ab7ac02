# Overview: Password and token primitives (bcrypt + PyJWT); stateless.

"""
Password/Token utility.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, 10 by default)
- JWTs signed with HS256; access and refresh tokens use different secrets
- Tokens at rest: bcrypt(sha256(token)). bcrypt only reads the first 72
  bytes of its input, and JWTs issued to one owner share a long header and
  payload prefix, so the raw token must not be fed to bcrypt directly.
"""

from __future__ import annotations

import hashlib
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

JWT_ALGORITHM = "HS256"
DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() compares in constant time.
    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _token_digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def hash_token(token: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash an issued JWT for storage."""
    return hash_password(_token_digest(token), rounds=rounds)


def verify_token_hash(token: str, token_hash: str) -> bool:
    return verify_password(_token_digest(token), token_hash)


def sign_token(payload: dict, secret: str, expires_in: timedelta) -> str:
    """
    Sign payload as a JWT expiring after expires_in.

    A random jti is added so two tokens minted in the same second for the
    same owner never collide.
    """
    now = datetime.now(timezone.utc)
    claims = dict(payload)
    claims["iat"] = now
    claims["exp"] = now + expires_in
    claims["jti"] = uuid.uuid4().hex
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, secret: str) -> dict:
    """
    Decode and verify a JWT.

    Raises jwt.InvalidTokenError (incl. ExpiredSignatureError) when the
    signature, expiry or format is wrong.
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
