"""Caller's company and its branches."""
import logging
from typing import List

from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import transaction
from hms.errors import NotFoundError
from hms.models import Branch, Company, Employee, User
from hms.repositories import BranchRepository, CompanyRepository, EmployeeRepository
from hms.schemas.company import BranchCreate, CompanyStats, CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyService:
    """Operations on the tenant the caller belongs to."""
    
    def __init__(self, db: Session, ctx: AuthContext):
        self.db = db
        self.ctx = ctx
        self.companies = CompanyRepository()
        self.branches = BranchRepository()
        self.employees = EmployeeRepository()
    
    def current(self) -> Company:
        company = self.companies.find_by_key(self.ctx.company_id, session=self.db)
        if company is None:
            raise NotFoundError("Company not found")
        return company
    
    def update(self, payload: CompanyUpdate) -> Company:
        company = self.current()
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            with transaction(self.db):
                self.companies.update(company.id, changes, actor=self.ctx.user_id, session=self.db)
            logger.info(f"Company {company.id} updated by {self.ctx.user_id}: {sorted(changes)}")
        return self.current()
    
    def list_branches(self) -> List[Branch]:
        self.current()
        return self.branches.list_for_company(self.ctx.company_id, session=self.db)
    
    def create_branch(self, payload: BranchCreate) -> Branch:
        company = self.current()
        with transaction(self.db):
            branch = self.branches.create(
                {**payload.model_dump(), "company_id": company.id},
                actor=self.ctx.user_id,
                session=self.db,
            )
        logger.info(f"Branch {branch.id} created in company {company.id}")
        return branch
    
    def stats(self) -> CompanyStats:
        company_id = self.current().id
        return CompanyStats(
            branches=self.branches.count({"company_id": company_id}, session=self.db),
            employees=self.employees.count({"company_id": company_id}, session=self.db),
            doctors=self.employees.count({"company_id": company_id, "is_doctor": True}, session=self.db),
            users=(
                self.db.query(User)
                .join(Employee, User.employee_id == Employee.id)
                .filter(Employee.company_id == company_id)
                .count()
            ),
        )
