"""Role and permission schemas."""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RoleBase(BaseModel):
    """Base role schema."""
    role_name: str = Field(min_length=2, max_length=100)
    role_description: str | None = Field(default=None, max_length=500)


class RoleCreate(RoleBase):
    """Create role request."""
    pass


class RoleRead(RoleBase):
    """Role response."""
    id: int
    uuid: str
    is_active: bool
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class RoleMenuRights(BaseModel):
    """Rights to set on one menu."""
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class MenuNode(BaseModel):
    """Menu tree node with the role's rights attached."""
    menu_id: int
    menu_name: str
    component: str | None = None
    route: str | None = None
    menu_order: int = 0
    hide: bool = False
    hidetab: bool = False
    rights: RoleMenuRights
    children: List["MenuNode"] = []
