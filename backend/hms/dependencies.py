"""Request authentication and authorization guards."""
from fastapi import Depends, Header

from hms.context import AuthContext
from hms.errors import ForbiddenError, UnauthorizedError
from hms.security import TokenKind, verify_token

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """Token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("No token provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError("No token provided")
    return token


async def authenticate(
    authorization: str | None = Header(default=None),
) -> AuthContext:
    """Caller identity from a valid access token; 401 otherwise."""
    token = extract_bearer_token(authorization)
    claims = verify_token(token, TokenKind.ACCESS)
    return AuthContext.from_claims(claims)


async def optional_auth(
    authorization: str | None = Header(default=None),
) -> AuthContext | None:
    """Caller identity when a valid token is present, else None."""
    try:
        return await authenticate(authorization)
    except UnauthorizedError:
        return None


def require_role(role_id: int):
    """Dependency to require one role id."""
    async def role_checker(ctx: AuthContext = Depends(authenticate)) -> AuthContext:
        if ctx.role_id != role_id:
            raise ForbiddenError("Insufficient role permissions")
        return ctx
    return role_checker


def require_role_name(*role_names: str):
    """Dependency to require any of the named roles."""
    async def role_checker(ctx: AuthContext = Depends(authenticate)) -> AuthContext:
        if ctx.role_name not in role_names:
            raise ForbiddenError("Insufficient role permissions")
        return ctx
    return role_checker


def require_company(company_id: int | None = None):
    """Dependency to pin the caller to one company."""
    async def company_checker(ctx: AuthContext = Depends(authenticate)) -> AuthContext:
        if company_id is not None and ctx.company_id != company_id:
            raise ForbiddenError("Access denied to this company")
        return ctx
    return company_checker


def require_branch(branch_id: int | None = None):
    """Dependency to pin the caller to one branch."""
    async def branch_checker(ctx: AuthContext = Depends(authenticate)) -> AuthContext:
        if branch_id is not None and ctx.branch_id != branch_id:
            raise ForbiddenError("Access denied to this branch")
        return ctx
    return branch_checker
