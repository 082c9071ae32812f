"""User management router, scoped to the caller's company."""
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import get_db
from hms.dependencies import authenticate
from hms.repositories import PageParams
from hms.schemas.auth import RegisterRequest
from hms.schemas.common import success_response
from hms.schemas.user import UserStatusUpdate, UserUpdate
from hms.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: Literal["ASC", "DESC", "asc", "desc"] = Query("DESC", alias="sortOrder"),
    status_filter: Literal["active", "inactive", "suspended"] | None = Query(None, alias="status"),
    role_id: int | None = Query(None, gt=0),
    search: str | None = Query(None, max_length=100),
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """List users in the caller's company."""
    result = UserService(db, ctx).list_users(
        {"status": status_filter, "role_id": role_id, "search": search},
        PageParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order),
    )
    return success_response(result.items, pagination=result.meta())


@router.get("/stats")
def user_stats(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """User counts for the caller's company."""
    return success_response(UserService(db, ctx).stats())


@router.get("/{user_id}")
def get_user(
    user_id: int,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Get one user of the caller's company."""
    return success_response(UserService(db, ctx).get_user(user_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: RegisterRequest,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Create a user in the caller's company."""
    result = UserService(db, ctx).create_user(payload)
    return success_response(result["user"], "User created successfully")


@router.patch("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Update a user."""
    user = UserService(db, ctx).update_user(user_id, payload)
    return success_response(user, "User updated successfully")


@router.patch("/{user_id}/status")
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Activate, deactivate or suspend a user."""
    user = UserService(db, ctx).update_status(user_id, payload.status)
    return success_response(user, "User status updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Soft delete a user."""
    UserService(db, ctx).delete_user(user_id)
    return success_response(None, "User deleted successfully")
