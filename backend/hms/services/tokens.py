"""Token claims built from the stored identity."""
from hms.schemas.user import UserDetailRead
from hms.security import TokenClaims, issue_token_pair


def claims_for(details: UserDetailRead) -> TokenClaims:
    """Claims for a freshly loaded identity."""
    return TokenClaims(
        user_id=details.id,
        user_uuid=details.uuid,
        employee_id=details.employee.id,
        employee_uuid=details.employee.uuid,
        employee_name=details.employee.employee_name,
        role_id=details.role.id,
        role_name=details.role.role_name,
        company_id=details.company.id,
        company_name=details.company.company_name,
        branch_id=details.branch.id if details.branch else None,
        branch_name=details.branch.branch_name if details.branch else None,
        email=details.email,
        is_doctor=details.employee.is_doctor,
    )


def session_payload(details: UserDetailRead, **extra) -> dict:
    """Identity view plus a new access/refresh pair."""
    return {"user": details, **issue_token_pair(claims_for(details)), **extra}
