"""User schemas."""
from datetime import date, datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hms.schemas.auth import NAME_PATTERN, PHONE_PATTERN, USERNAME_PATTERN

StatusValue = Literal["active", "inactive", "suspended"]


class EmployeeSummary(BaseModel):
    """Employee part of a user view."""
    id: int
    uuid: str
    company_id: int
    branch_id: int | None = None
    employee_code: str | None = None
    employee_name: str
    first_name: str
    last_name: str
    phone: str | None = None
    designation: str | None = None
    department: str | None = None
    date_of_joining: date | None = None
    is_doctor: bool = False
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True)


class RoleSummary(BaseModel):
    id: int
    uuid: str
    role_name: str
    role_description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CompanySummary(BaseModel):
    id: int
    uuid: str
    company_name: str

    model_config = ConfigDict(from_attributes=True)


class BranchSummary(BaseModel):
    id: int
    uuid: str
    branch_name: str

    model_config = ConfigDict(from_attributes=True)


class MenuRight(BaseModel):
    """Rights a role holds on one menu."""
    menu_id: int
    menu_name: str
    route: str | None = None
    parent_menu_id: int | None = None
    menu_order: int = 0
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class UserDetailRead(BaseModel):
    """User joined with employee, role, company and branch. Never carries the password hash."""
    id: int
    uuid: str
    username: str
    email: str
    status: str
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
    employee: EmployeeSummary
    role: RoleSummary
    company: CompanySummary
    branch: BranchSummary | None = None
    menus: List[MenuRight] | None = None
    features: List[str] | None = None


class UserUpdate(BaseModel):
    """Admin edit of a user in the same company."""
    email: EmailStr | None = None
    username: str | None = Field(default=None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    first_name: str | None = Field(default=None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: str | None = Field(default=None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    role_id: int | None = Field(default=None, gt=0)
    status: StatusValue | None = None


class UserStatusUpdate(BaseModel):
    """Change a user's status."""
    status: StatusValue


class UserStats(BaseModel):
    """User counts for one company."""
    total: int
    active: int
    inactive: int
    suspended: int
    by_role: dict[str, int]
