# fuse_server/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from fuse_server.core.config import Settings

# Password hashing context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Spends the same time as a failed verify, for unknown accounts."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    user_id: str, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    """Signs the claim set ``sub``/``iat``/``exp`` with the server secret."""
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {
        "sub": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verifies signature and expiry.

    Only the configured algorithm is accepted, whatever the token header
    claims. Raises ``jose.ExpiredSignatureError`` or ``jose.JWTError``.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.algorithm])
