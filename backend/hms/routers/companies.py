"""Company router for the caller's own tenant."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import get_db
from hms.dependencies import authenticate, require_role_name
from hms.models import ADMIN_ROLE_NAMES
from hms.schemas.common import success_response
from hms.schemas.company import BranchCreate, BranchRead, CompanyRead, CompanyUpdate
from hms.services.companies import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"])

require_admin = require_role_name(*ADMIN_ROLE_NAMES)


@router.get("/current")
def get_company(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Get the caller's company."""
    return success_response(CompanyRead.model_validate(CompanyService(db, ctx).current()))


@router.patch("/current")
def update_company(
    payload: CompanyUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update the caller's company."""
    company = CompanyService(db, ctx).update(payload)
    return success_response(CompanyRead.model_validate(company), "Company updated successfully")


@router.get("/current/branches")
def list_branches(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """List active branches of the caller's company."""
    branches = CompanyService(db, ctx).list_branches()
    return success_response([BranchRead.model_validate(b) for b in branches])


@router.post("/current/branches", status_code=status.HTTP_201_CREATED)
def create_branch(
    payload: BranchCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Add a branch to the caller's company."""
    branch = CompanyService(db, ctx).create_branch(payload)
    return success_response(BranchRead.model_validate(branch), "Branch created successfully")


@router.get("/current/stats")
def company_stats(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Headcount for the caller's company."""
    return success_response(CompanyService(db, ctx).stats())
