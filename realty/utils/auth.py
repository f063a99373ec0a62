"""
Access tokens and password hashing for admin accounts.

Tokens are HS256 JWTs (python-jose) carrying the admin id, email, role and
permissions. Passwords are bcrypt hashes managed through passlib.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Iterable, List
from jose import JWTError, jwt
from passlib.context import CryptContext
from realty.config import settings
import uuid


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ("sub", "email", "role", "exp")
MIN_PASSWORD_LENGTH = 8


@dataclass
class TokenClaims:
    """Identity and role of the admin a verified token was issued to."""

    admin_id: str
    email: str
    role: str
    permissions: List[str] = field(default_factory=list)
    exp: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenClaims":
        return cls(
            admin_id=str(uuid.UUID(payload["sub"])),
            email=payload["email"],
            role=payload["role"],
            permissions=list(payload.get("permissions") or []),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


def create_access_token(
    admin_id: uuid.UUID,
    email: str,
    role: str,
    permissions: Optional[Iterable[str]] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Sign a token for an admin.

    Args:
        admin_id: Subject of the token
        email: Admin email, echoed back in the claims
        role: Role value (super_admin/admin/editor/viewer)
        permissions: Capability strings carried in the token
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims = {
        "sub": str(admin_id),
        "email": email,
        "role": role,
        "permissions": list(permissions or []),
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry, then check the claim set.

    Raises:
        ExpiredSignatureError: The token is past its ``exp``
        JWTError: Bad signature, wrong token type or malformed claims
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

    if payload.get("type") != TOKEN_TYPE:
        raise JWTError(f"Expected an {TOKEN_TYPE} token")

    missing = [name for name in REQUIRED_CLAIMS if not payload.get(name)]
    if missing:
        raise JWTError(f"Token is missing claims: {', '.join(missing)}")

    try:
        return TokenClaims.from_payload(payload)
    except (TypeError, ValueError) as e:
        raise JWTError(f"Malformed token claims: {e}")


def hash_password(password: str) -> str:
    """Bcrypt hash; passwords shorter than eight characters raise ValueError."""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
