"""Authentication workflow: login, refresh, profile and password."""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from hms.database import transaction
from hms.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from hms.models import User, UserStatus
from hms.repositories import EmployeeRepository, UserRepository
from hms.schemas.auth import ProfileUpdate
from hms.schemas.user import UserDetailRead
from hms.security import TokenKind, hash_password, verify_password, verify_token
from hms.services.tokens import session_payload

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone")


class AuthService:
    """Credential checks and token issuance for one request."""
    
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository()
        self.employees = EmployeeRepository()
    
    def _find_by_identifier(self, identifier: str) -> User | None:
        """Try the identifier as an email, then as a username."""
        return (
            self.users.find_by_email(identifier, session=self.db)
            or self.users.find_by_username(identifier, session=self.db)
        )
    
    def login(self, identifier: str, password: str) -> dict:
        """Authenticate and return the identity with a fresh token pair."""
        user = self._find_by_identifier(identifier)
        if user is None:
            logger.warning("Login rejected: unknown identifier")
            raise UnauthorizedError("Invalid credentials")
        
        if not verify_password(password, user.password_hash):
            with transaction(self.db):
                user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
            logger.warning(f"Login rejected: bad password for user {user.id}")
            raise UnauthorizedError("Invalid credentials")
        
        if user.status != UserStatus.ACTIVE.value:
            raise ForbiddenError("Account is not active")
        
        with transaction(self.db):
            self.users.update(
                user.id,
                {"last_login": datetime.utcnow(), "failed_login_attempts": 0},
                session=self.db,
            )
        
        details = self.users.find_user_with_permissions(user.id, session=self.db)
        logger.info(f"User {user.id} logged in")
        return session_payload(details)
    
    def refresh(self, refresh_token: str) -> dict:
        """Rotate tokens after re-reading the current identity."""
        claims = verify_token(refresh_token, TokenKind.REFRESH)
        user = self.users.find_by_key(claims.user_id, session=self.db)
        if user is None:
            raise UnauthorizedError("User not found")
        if user.status != UserStatus.ACTIVE.value:
            raise ForbiddenError("Account is not active")
        
        details = self.users.find_user_with_employee_details(user.id, session=self.db)
        return session_payload(details)
    
    def get_profile(self, user_id: int) -> UserDetailRead:
        details = self.users.find_user_with_permissions(user_id, session=self.db)
        if details is None:
            raise NotFoundError("User not found")
        return details
    
    def update_profile(self, user_id: int, payload: ProfileUpdate) -> UserDetailRead:
        """Update employee name and phone; other fields are not editable here."""
        user = self.users.find_by_key(user_id, session=self.db)
        if user is None:
            raise NotFoundError("User not found")
        
        changes = {
            k: v for k, v in payload.model_dump(exclude_unset=True).items()
            if k in PROFILE_FIELDS and v is not None
        }
        if changes:
            employee = user.employee
            first_name = changes.get("first_name", employee.first_name)
            last_name = changes.get("last_name", employee.last_name)
            changes["employee_name"] = f"{first_name} {last_name}"
            with transaction(self.db):
                self.employees.update(employee.id, changes, actor=user_id, session=self.db)
        
        return self.get_profile(user_id)
    
    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.users.find_by_key(user_id, session=self.db)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        if new_password == current_password:
            raise ValidationError(
                "New password must be different from current password",
                field="newPassword",
            )
        
        with transaction(self.db):
            self.users.update(
                user_id,
                {"password_hash": hash_password(new_password)},
                actor=user_id,
                session=self.db,
            )
        logger.info(f"Password changed for user {user_id}")
