"""Registration workflows: simple, complete onboarding and company-scoped creation.

Each workflow runs as one transaction. Any failure, including a unique
constraint hit at insert time, rolls back every company, branch, employee
and user row written so far.
"""
import logging
import re
import time
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hms.database import transaction
from hms.errors import ConflictError, NotFoundError, conflict_from_integrity_error
from hms.models import Branch, Company, Role
from hms.repositories import (
    BranchRepository, EmployeeBranchRepository, EmployeeRepository,
    RoleRepository, UserRepository,
)
from hms.schemas.auth import RegisterCompleteRequest, RegisterRequest
from hms.security import hash_password
from hms.services.provisioning import ProvisioningService
from hms.services.tokens import session_payload

logger = logging.getLogger(__name__)

DEFAULT_DESIGNATION = "Administrator"
DEFAULT_DEPARTMENT = "Administration"


def username_from_email(email: str) -> str:
    """Alphanumeric login name derived from the email local part."""
    local = re.sub(r"[^A-Za-z0-9]", "", email.split("@", 1)[0])
    if len(local) < 3:
        local = f"{local}user"
    return local[:30]


def new_employee_code() -> str:
    return f"EMP{int(time.time() * 1000)}"


class RegistrationService:
    """Creates login identities together with their tenant scaffolding."""
    
    def __init__(self, db: Session):
        self.db = db
        self.provisioning = ProvisioningService(db)
        self.users = UserRepository()
        self.employees = EmployeeRepository()
        self.branches = BranchRepository()
        self.roles = RoleRepository()
        self.employee_branches = EmployeeBranchRepository()
    
    def ensure_unique_identity(self, email: str, username: str) -> None:
        """Email must be unused by users and employees; username unused by users."""
        if self.users.find_by_email(email, session=self.db) or self.employees.email_taken(email, session=self.db):
            raise ConflictError("Email already exists", field="email")
        if self.users.find_by_username(username, session=self.db):
            raise ConflictError("Username already exists", field="username")
    
    def _resolve_role(self, role_id: int | None, actor: int | None) -> Role:
        if role_id is None:
            return self.provisioning.resolve_or_create_administrator_role(actor=actor)
        role = self.roles.find_by_key(role_id, session=self.db)
        if role is None:
            raise NotFoundError("Role not found")
        return role
    
    def _resolve_branch(self, company: Company, branch_id: int | None) -> Branch | None:
        if branch_id is None:
            return None
        branch = self.branches.find_by_key(branch_id, session=self.db)
        if branch is None or branch.company_id != company.id:
            raise NotFoundError("Branch not found")
        return branch
    
    def _create_identity(
        self,
        *,
        company: Company,
        branch: Branch | None,
        role: Role,
        username: str,
        email: str,
        password: str,
        employee_fields: dict,
        actor: int | None,
    ):
        first_name = employee_fields["first_name"]
        last_name = employee_fields["last_name"]
        employee = self.employees.create(
            {
                **employee_fields,
                "company_id": company.id,
                "branch_id": branch.id if branch else None,
                "employee_code": new_employee_code(),
                "employee_name": f"{first_name} {last_name}",
                "email": email,
                "date_of_joining": date.today(),
            },
            actor=actor,
            session=self.db,
        )
        user = self.users.create(
            {
                "username": username,
                "email": email,
                "password_hash": hash_password(password),
                "employee_id": employee.id,
                "role_id": role.id,
            },
            actor=actor,
            session=self.db,
        )
        return employee, user
    
    def register(
        self,
        payload: RegisterRequest,
        forced_company_id: int | None = None,
        actor: int | None = None,
    ) -> dict:
        """Register a user; forced_company_id overrides any company in the payload."""
        company_id = forced_company_id if forced_company_id is not None else payload.company_id
        try:
            with transaction(self.db):
                self.ensure_unique_identity(payload.email, payload.username)
                company, created = self.provisioning.resolve_or_create_company(
                    company_id,
                    payload.first_name,
                    payload.last_name,
                    {
                        "company_name": payload.company_name,
                        "email": payload.company_email,
                        "phone": payload.company_phone,
                    },
                    actor=actor,
                )
                if created:
                    branch = self.provisioning.create_default_branch(company, actor=actor)
                else:
                    branch = self._resolve_branch(company, payload.branch_id)
                role = self._resolve_role(payload.role_id, actor)
                _, user = self._create_identity(
                    company=company,
                    branch=branch,
                    role=role,
                    username=payload.username,
                    email=payload.email,
                    password=payload.password,
                    employee_fields={
                        "first_name": payload.first_name,
                        "last_name": payload.last_name,
                        "phone": payload.phone,
                        "designation": payload.designation,
                        "department": payload.department,
                        "is_doctor": payload.is_doctor,
                    },
                    actor=actor,
                )
                user_id = user.id
        except IntegrityError as e:
            raise conflict_from_integrity_error(e) from e
        
        logger.info(f"Registered user {user_id} in company {company.id} (created={created})")
        details = self.users.find_user_with_employee_details(user_id, session=self.db)
        return session_payload(details)
    
    def register_complete(self, payload: RegisterCompleteRequest) -> dict:
        """Onboard an identity with company, branch link and, for admins, full rights."""
        username = username_from_email(payload.email)
        try:
            with transaction(self.db):
                self.ensure_unique_identity(payload.email, username)
                company, created = self.provisioning.resolve_or_create_company(
                    payload.company_id,
                    payload.first_name,
                    payload.last_name,
                    {
                        "company_name": payload.company_name,
                        "email": payload.company_email or payload.email,
                        "phone": payload.company_phone or payload.phone,
                        "address": payload.address_line1,
                        "city": payload.city,
                        "state": payload.state,
                        "country": payload.country,
                        "postal_code": payload.pincode,
                    },
                )
                if created:
                    branch = self.provisioning.create_default_branch(company)
                elif payload.branch_id is not None:
                    branch = self._resolve_branch(company, payload.branch_id)
                else:
                    branch = self.branches.find_default_for_company(company.id, session=self.db)
                    if branch is None:
                        raise NotFoundError("No active branch found for company")
                role = self._resolve_role(payload.role_id, None)
                employee, user = self._create_identity(
                    company=company,
                    branch=branch,
                    role=role,
                    username=username,
                    email=payload.email,
                    password=payload.password,
                    employee_fields={
                        "first_name": payload.first_name,
                        "last_name": payload.last_name,
                        "phone": payload.phone,
                        "designation": payload.designation or DEFAULT_DESIGNATION,
                        "department": payload.department or DEFAULT_DEPARTMENT,
                        "is_doctor": payload.is_doctor,
                    },
                    actor=None,
                )
                self.employee_branches.create(
                    {"employee_id": employee.id, "branch_id": branch.id},
                    session=self.db,
                )
                if payload.is_admin:
                    self.provisioning.grant_full_permissions(role.id)
                user_id = user.id
                company_id, branch_id = company.id, branch.id
        except IntegrityError as e:
            raise conflict_from_integrity_error(e) from e
        
        logger.info(f"Completed registration of user {user_id} in company {company_id}")
        details = self.users.find_user_with_permissions(user_id, session=self.db)
        return session_payload(details, company_id=company_id, branch_id=branch_id)
