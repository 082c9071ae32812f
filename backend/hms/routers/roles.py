"""Role and permission router."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import get_db
from hms.dependencies import authenticate, require_role_name
from hms.models import ADMIN_ROLE_NAMES
from hms.schemas.common import success_response
from hms.schemas.role import RoleCreate, RoleMenuRights, RoleRead
from hms.services.roles import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])

require_admin = require_role_name(*ADMIN_ROLE_NAMES)


@router.get("")
def list_roles(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """List all roles."""
    roles = RoleService(db, ctx).list_roles()
    return success_response([RoleRead.model_validate(r) for r in roles])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_role(
    payload: RoleCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a role."""
    role = RoleService(db, ctx).create_role(payload)
    return success_response(RoleRead.model_validate(role), "Role created successfully")


@router.get("/{role_id}")
def get_role(role_id: int, ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Get a role."""
    return success_response(RoleRead.model_validate(RoleService(db, ctx).get_role(role_id)))


@router.get("/{role_id}/menus")
def get_role_menus(role_id: int, ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Menu tree with the role's rights."""
    return success_response(RoleService(db, ctx).menu_tree(role_id))


@router.put("/{role_id}/menus/{menu_id}")
def set_role_menu_rights(
    role_id: int,
    menu_id: int,
    rights: RoleMenuRights,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Set the role's rights on one menu."""
    result = RoleService(db, ctx).set_menu_rights(role_id, menu_id, rights)
    return success_response(result, "Role permissions updated successfully")


@router.delete("/{role_id}")
def delete_role(role_id: int, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete an unassigned role."""
    RoleService(db, ctx).delete_role(role_id)
    return success_response(None, "Role deleted successfully")
