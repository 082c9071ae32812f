"""Company, branch and employee repositories."""
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from hms.models.company import Company, Branch, DEFAULT_BRANCH_NAME
from hms.models.employee import Employee, EmployeeBranch, EmployeeFile
from hms.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    model = Company


class BranchRepository(BaseRepository[Branch]):
    model = Branch

    def find_default_for_company(self, company_id: int, session: Session | None = None) -> Branch | None:
        """The company's Default Branch, else its oldest active branch."""
        with self._scope(session) as db:
            active = db.query(Branch).filter(
                Branch.company_id == company_id,
                Branch.is_active.is_(True),
            )
            branch = active.filter(Branch.branch_name == DEFAULT_BRANCH_NAME).first()
            return branch or active.order_by(Branch.id).first()

    def list_for_company(self, company_id: int, session: Session | None = None) -> List[Branch]:
        """Every active branch of a company, oldest first."""
        with self._scope(session) as db:
            return (
                db.query(Branch)
                .filter(Branch.company_id == company_id, Branch.is_active.is_(True))
                .order_by(Branch.id)
                .all()
            )


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    def email_taken(
        self,
        email: str,
        exclude_id: int | None = None,
        session: Session | None = None,
    ) -> bool:
        with self._scope(session) as db:
            query = db.query(Employee).filter(func.lower(Employee.email) == email.lower())
            if exclude_id is not None:
                query = query.filter(Employee.id != exclude_id)
            return db.query(query.exists()).scalar()


class EmployeeBranchRepository(BaseRepository[EmployeeBranch]):
    model = EmployeeBranch


class EmployeeFileRepository(BaseRepository[EmployeeFile]):
    model = EmployeeFile
