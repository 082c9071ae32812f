"""Password hashing and signed token codec."""
import uuid
from datetime import datetime, timedelta
from enum import Enum

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from hms.config import Settings, get_settings
from hms.errors import InvalidTokenError, TokenExpiredError


class TokenKind(str, Enum):
    """Token purposes; each is signed with its own secret."""
    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """Identity facts carried inside every issued token."""
    user_id: int
    user_uuid: str
    employee_id: int
    employee_uuid: str
    employee_name: str
    role_id: int
    role_name: str
    company_id: int
    company_name: str
    branch_id: int | None = None
    branch_name: str | None = None
    email: str | None = None
    is_doctor: bool = False

    model_config = ConfigDict(extra="ignore")


REQUIRED_CLAIMS = [
    name for name, field in TokenClaims.model_fields.items() if field.is_required()
]


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password."""
    rounds = rounds or get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # malformed stored hash
        return False


def _secret_for(kind: TokenKind, settings: Settings) -> str:
    if kind == TokenKind.ACCESS:
        return settings.jwt_access_secret
    return settings.jwt_refresh_secret


def token_lifetime(kind: TokenKind, settings: Settings | None = None) -> timedelta:
    settings = settings or get_settings()
    if kind == TokenKind.ACCESS:
        return timedelta(minutes=settings.access_token_expire_minutes)
    return timedelta(days=settings.refresh_token_expire_days)


def issue_token(
    claims: TokenClaims,
    kind: TokenKind,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> str:
    """Sign a token of the given kind carrying the identity claims."""
    settings = settings or get_settings()
    issued_at = now or datetime.utcnow()
    to_encode = claims.model_dump()
    to_encode.update({
        "sub": str(claims.user_id),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": issued_at,
        "exp": issued_at + token_lifetime(kind, settings),
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, _secret_for(kind, settings), algorithm=settings.jwt_algorithm)


def decode_token(token: str, kind: TokenKind, settings: Settings | None = None) -> dict:
    """Verify signature, issuer, audience and expiry; return the raw payload."""
    settings = settings or get_settings()
    try:
        return jwt.decode(
            token,
            _secret_for(kind, settings),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()


def verify_token(token: str, kind: TokenKind, settings: Settings | None = None) -> TokenClaims:
    """Verify a token and return its identity claims."""
    payload = decode_token(token, kind, settings)
    missing = [name for name in REQUIRED_CLAIMS if payload.get(name) is None]
    if missing:
        raise InvalidTokenError(
            f"Invalid authentication token - missing fields: {', '.join(missing)}"
        )
    try:
        return TokenClaims.model_validate(payload)
    except PydanticValidationError:
        raise InvalidTokenError()


def issue_token_pair(claims: TokenClaims, settings: Settings | None = None) -> dict:
    """Access and refresh tokens plus the access expiry timestamp."""
    settings = settings or get_settings()
    now = datetime.utcnow()
    return {
        "token": issue_token(claims, TokenKind.ACCESS, settings, now),
        "refreshToken": issue_token(claims, TokenKind.REFRESH, settings, now),
        "expiresAt": now + token_lifetime(TokenKind.ACCESS, settings),
    }
