"""Company-scoped user management."""
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import transaction
from hms.errors import ConflictError, NotFoundError, ValidationError, conflict_from_integrity_error
from hms.models import ADMIN_ROLE_NAMES, UserStatus
from hms.repositories import EmployeeRepository, Page, PageParams, RoleRepository, UserRepository
from hms.schemas.auth import RegisterRequest
from hms.schemas.user import UserDetailRead, UserStats, UserUpdate
from hms.services.registration import RegistrationService

logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = ("first_name", "last_name", "phone")


class UserService:
    """User operations confined to the caller's company.

    Users of other companies are reported as not found, never as forbidden.
    """
    
    def __init__(self, db: Session, ctx: AuthContext):
        self.db = db
        self.ctx = ctx
        self.users = UserRepository()
        self.employees = EmployeeRepository()
        self.roles = RoleRepository()
    
    def _get_in_company(self, user_id: int) -> UserDetailRead:
        details = self.users.find_user_with_employee_details(
            user_id, company_id=self.ctx.company_id, session=self.db
        )
        if details is None:
            raise NotFoundError("User not found")
        return details
    
    def _require_admin_for(self, target: UserDetailRead, message: str) -> None:
        """Only administrators may act on administrator accounts."""
        if target.role.role_name not in ADMIN_ROLE_NAMES:
            return
        caller = self.users.find_user_with_employee_details(self.ctx.user_id, session=self.db)
        if caller is None or caller.role.role_name not in ADMIN_ROLE_NAMES:
            raise ValidationError(message)
    
    def list_users(
        self,
        filters: dict[str, Any] | None = None,
        page_params: PageParams | None = None,
    ) -> Page[UserDetailRead]:
        return self.users.list_with_details(
            self.ctx.company_id, filters, page_params, session=self.db
        )
    
    def get_user(self, user_id: int) -> UserDetailRead:
        return self._get_in_company(user_id)
    
    def create_user(self, payload: RegisterRequest) -> dict:
        """Create a user inside the caller's company, whatever company the payload names."""
        result = RegistrationService(self.db).register(
            payload,
            forced_company_id=self.ctx.company_id,
            actor=self.ctx.user_id,
        )
        logger.info(
            f"User {result['user'].id} created by {self.ctx.user_id} in company {self.ctx.company_id}"
        )
        return result
    
    def update_user(self, user_id: int, payload: UserUpdate) -> UserDetailRead:
        target = self._get_in_company(user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        
        if target.id == self.ctx.user_id:
            if "role_id" in changes and changes["role_id"] != target.role.id:
                raise ValidationError("Cannot change your own role")
            if "status" in changes and changes["status"] != target.status:
                raise ValidationError("Cannot change your own status")
        
        user_changes: dict[str, Any] = {}
        if "email" in changes and changes["email"].lower() != target.email.lower():
            email_in_use = (
                self.users.find_by_email(changes["email"], session=self.db) is not None
                or self.employees.email_taken(
                    changes["email"], exclude_id=target.employee.id, session=self.db
                )
            )
            if email_in_use:
                raise ConflictError("Email already exists", field="email")
            user_changes["email"] = changes["email"]
        if "username" in changes and changes["username"] != target.username:
            if self.users.exists_by_filter({"username": changes["username"]}, exclude_id=user_id, session=self.db):
                raise ConflictError("Username already exists", field="username")
            user_changes["username"] = changes["username"]
        if "role_id" in changes and changes["role_id"] != target.role.id:
            if self.roles.find_by_key(changes["role_id"], session=self.db) is None:
                raise NotFoundError("Role not found")
            user_changes["role_id"] = changes["role_id"]
        if "status" in changes and changes["status"] != target.status:
            self._require_admin_for(target, "Insufficient permissions to change this user's status")
            user_changes["status"] = changes["status"]
        
        employee_changes = {k: changes[k] for k in EMPLOYEE_FIELDS if k in changes}
        if "first_name" in employee_changes or "last_name" in employee_changes:
            first_name = employee_changes.get("first_name", target.employee.first_name)
            last_name = employee_changes.get("last_name", target.employee.last_name)
            employee_changes["employee_name"] = f"{first_name} {last_name}"
        
        try:
            with transaction(self.db):
                if user_changes:
                    self.users.update(user_id, user_changes, actor=self.ctx.user_id, session=self.db)
                if "email" in user_changes:
                    employee_changes["email"] = user_changes["email"]
                if employee_changes:
                    self.employees.update(
                        target.employee.id, employee_changes, actor=self.ctx.user_id, session=self.db
                    )
        except IntegrityError as e:
            raise conflict_from_integrity_error(e) from e
        
        logger.info(
            f"User {user_id} updated by {self.ctx.user_id}: "
            f"{sorted(user_changes) + sorted(employee_changes)}"
        )
        return self._get_in_company(user_id)
    
    def update_status(self, user_id: int, status: str) -> UserDetailRead:
        if status not in {s.value for s in UserStatus}:
            raise ValidationError("Invalid status. Must be active, inactive, or suspended")
        target = self._get_in_company(user_id)
        if target.id == self.ctx.user_id:
            raise ValidationError("Cannot change your own status")
        self._require_admin_for(target, "Insufficient permissions to change this user's status")
        
        with transaction(self.db):
            self.users.update(user_id, {"status": status}, actor=self.ctx.user_id, session=self.db)
        logger.info(
            f"User {user_id} status set to {status} by {self.ctx.user_id} "
            f"(target role {target.role.role_name})"
        )
        return self._get_in_company(user_id)
    
    def delete_user(self, user_id: int) -> None:
        """Soft delete: the account is marked inactive."""
        target = self._get_in_company(user_id)
        if target.id == self.ctx.user_id:
            raise ValidationError("Cannot delete your own account")
        if target.status == UserStatus.INACTIVE.value:
            raise ValidationError("User is already deleted")
        self._require_admin_for(target, "Insufficient permissions to delete this user")
        
        with transaction(self.db):
            self.users.update(
                user_id, {"status": UserStatus.INACTIVE.value}, actor=self.ctx.user_id, session=self.db
            )
        logger.info(f"User {user_id} deleted by {self.ctx.user_id}")
    
    def stats(self) -> UserStats:
        return UserStats(**self.users.statistics(self.ctx.company_id, session=self.db))
