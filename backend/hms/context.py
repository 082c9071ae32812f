"""Per-request identity passed explicitly into services."""
from dataclasses import dataclass

from hms.models.role import ADMIN_ROLE_NAMES
from hms.security import TokenClaims


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller; company_id is the tenant boundary."""
    user_id: int
    user_uuid: str
    employee_id: int
    employee_uuid: str
    role_id: int
    role_name: str
    company_id: int
    branch_id: int | None = None
    is_doctor: bool = False

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "AuthContext":
        return cls(
            user_id=claims.user_id,
            user_uuid=claims.user_uuid,
            employee_id=claims.employee_id,
            employee_uuid=claims.employee_uuid,
            role_id=claims.role_id,
            role_name=claims.role_name,
            company_id=claims.company_id,
            branch_id=claims.branch_id,
            is_doctor=claims.is_doctor,
        )

    @property
    def is_admin(self) -> bool:
        return self.role_name in ADMIN_ROLE_NAMES
