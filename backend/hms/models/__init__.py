"""Database models."""
from hms.models.company import Company, Branch, DEFAULT_BRANCH_NAME
from hms.models.employee import Employee, EmployeeBranch, EmployeeFile
from hms.models.user import User, UserStatus
from hms.models.role import (
    Role, Menu, Feature, RoleMenu, RoleFeature,
    ADMINISTRATOR_ROLE, ADMIN_ROLE_NAMES,
)

__all__ = [
    "Company",
    "Branch",
    "DEFAULT_BRANCH_NAME",
    "Employee",
    "EmployeeBranch",
    "EmployeeFile",
    "User",
    "UserStatus",
    "Role",
    "Menu",
    "Feature",
    "RoleMenu",
    "RoleFeature",
    "ADMINISTRATOR_ROLE",
    "ADMIN_ROLE_NAMES",
]
