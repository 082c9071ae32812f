"""Pydantic schemas for API request/response."""
from hms.schemas.common import success_response
from hms.schemas.auth import (
    RegisterRequest, RegisterCompleteRequest, LoginRequest,
    RefreshTokenRequest, ChangePasswordRequest, ProfileUpdate,
)
from hms.schemas.user import (
    UserDetailRead, UserUpdate, UserStatusUpdate, UserStats, MenuRight,
)
from hms.schemas.role import RoleCreate, RoleRead, RoleMenuRights, MenuNode
from hms.schemas.company import (
    CompanyRead, CompanyUpdate, BranchCreate, BranchRead, CompanyStats,
)

__all__ = [
    "success_response",
    "RegisterRequest", "RegisterCompleteRequest", "LoginRequest",
    "RefreshTokenRequest", "ChangePasswordRequest", "ProfileUpdate",
    "UserDetailRead", "UserUpdate", "UserStatusUpdate", "UserStats", "MenuRight",
    "RoleCreate", "RoleRead", "RoleMenuRights", "MenuNode",
    "CompanyRead", "CompanyUpdate", "BranchCreate", "BranchRead", "CompanyStats",
]
