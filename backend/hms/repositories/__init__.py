"""Repositories over the identity tables."""
from hms.repositories.base import BaseRepository, Page, PageParams
from hms.repositories.company import (
    CompanyRepository, BranchRepository, EmployeeRepository,
    EmployeeBranchRepository, EmployeeFileRepository,
)
from hms.repositories.role import (
    RoleRepository, MenuRepository, FeatureRepository,
    RoleMenuRepository, RoleFeatureRepository, FULL_RIGHTS,
)
from hms.repositories.user import UserRepository

__all__ = [
    "BaseRepository", "Page", "PageParams",
    "CompanyRepository", "BranchRepository", "EmployeeRepository",
    "EmployeeBranchRepository", "EmployeeFileRepository",
    "RoleRepository", "MenuRepository", "FeatureRepository",
    "RoleMenuRepository", "RoleFeatureRepository", "FULL_RIGHTS",
    "UserRepository",
]
