"""Tenant provisioning: company, default branch, administrator role and its rights."""
import logging

from sqlalchemy.orm import Session

from hms.errors import NotFoundError
from hms.models import ADMINISTRATOR_ROLE, DEFAULT_BRANCH_NAME, Branch, Company, Role
from hms.repositories import (
    BranchRepository, CompanyRepository, FeatureRepository, MenuRepository,
    RoleFeatureRepository, RoleMenuRepository, RoleRepository, FULL_RIGHTS,
)

logger = logging.getLogger(__name__)


class ProvisioningService:
    """Creates or resolves the tenant scaffolding a registration needs."""
    
    def __init__(self, db: Session):
        self.db = db
        self.companies = CompanyRepository()
        self.branches = BranchRepository()
        self.roles = RoleRepository()
        self.menus = MenuRepository()
        self.features = FeatureRepository()
        self.role_menus = RoleMenuRepository()
        self.role_features = RoleFeatureRepository()
    
    def resolve_or_create_company(
        self,
        company_id: int | None,
        first_name: str,
        last_name: str,
        fields: dict | None = None,
        actor: int | None = None,
    ) -> tuple[Company, bool]:
        """Return (company, created). An unknown or inactive id is NotFound."""
        if company_id is not None:
            company = self.companies.find_by_key(company_id, session=self.db)
            if company is None:
                raise NotFoundError("Company not found")
            return company, False
        
        values = {k: v for k, v in (fields or {}).items() if v is not None}
        if not values.get("company_name"):
            values["company_name"] = f"{first_name} {last_name} Company"
        company = self.companies.create(values, actor=actor, session=self.db)
        logger.info(f"Created company {company.id} ({company.company_name})")
        return company, True
    
    def create_default_branch(self, company: Company, actor: int | None = None) -> Branch:
        """Create the single Default Branch of a new company."""
        branch = self.branches.create(
            {
                "company_id": company.id,
                "branch_name": DEFAULT_BRANCH_NAME,
                "email": company.email,
                "phone": company.phone,
                "address": company.address,
                "city": company.city,
                "state": company.state,
                "country": company.country,
                "postal_code": company.postal_code,
            },
            actor=actor,
            session=self.db,
        )
        logger.info(f"Created default branch {branch.id} for company {company.id}")
        return branch
    
    def resolve_or_create_administrator_role(self, actor: int | None = None) -> Role:
        """The global Administrator role, shared by every tenant."""
        role = self.roles.find_by_name(ADMINISTRATOR_ROLE, session=self.db)
        if role is not None:
            return role
        role = self.roles.create(
            {
                "role_name": ADMINISTRATOR_ROLE,
                "role_description": "Full access to all menus and features",
            },
            actor=actor,
            session=self.db,
        )
        logger.info(f"Created {ADMINISTRATOR_ROLE} role {role.id}")
        return role
    
    def grant_full_permissions(self, role_id: int, actor: int | None = None) -> dict:
        """Upsert full rights on every active menu and feature. Safe to repeat."""
        menus = self.menus.list_active(session=self.db)
        for menu in menus:
            self.role_menus.upsert(role_id, menu.id, FULL_RIGHTS, actor=actor, session=self.db)
        
        features = self.features.list_active(session=self.db)
        for feature in features:
            self.role_features.upsert(role_id, feature.id, actor=actor, session=self.db)
        
        logger.info(
            f"Granted full permissions to role {role_id}: "
            f"{len(menus)} menus, {len(features)} features"
        )
        return {"menus": len(menus), "features": len(features)}
