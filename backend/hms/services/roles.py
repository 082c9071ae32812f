"""Role catalog and menu rights management."""
import logging
from typing import List

from sqlalchemy.orm import Session

from hms.context import AuthContext
from hms.database import transaction
from hms.errors import ConflictError, NotFoundError
from hms.models import Role, User
from hms.repositories import MenuRepository, RoleMenuRepository, RoleRepository
from hms.schemas.role import MenuNode, RoleCreate, RoleMenuRights

logger = logging.getLogger(__name__)


class RoleService:
    """Roles are global; any authenticated user may read them."""
    
    def __init__(self, db: Session, ctx: AuthContext):
        self.db = db
        self.ctx = ctx
        self.roles = RoleRepository()
        self.menus = MenuRepository()
        self.role_menus = RoleMenuRepository()
    
    def _get(self, role_id: int) -> Role:
        role = self.roles.find_by_key(role_id, session=self.db)
        if role is None:
            raise NotFoundError("Role not found")
        return role
    
    def list_roles(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.role_name).all()
    
    def get_role(self, role_id: int) -> Role:
        return self._get(role_id)
    
    def create_role(self, payload: RoleCreate) -> Role:
        if self.roles.exists_by_filter({"role_name": payload.role_name}, session=self.db):
            raise ConflictError("Role with this name already exists", field="role_name")
        with transaction(self.db):
            role = self.roles.create(payload.model_dump(), actor=self.ctx.user_id, session=self.db)
        logger.info(f"Role {role.id} ({role.role_name}) created by {self.ctx.user_id}")
        return role
    
    def menu_tree(self, role_id: int) -> List[MenuNode]:
        """Active menus nested by parent, each with this role's rights."""
        self._get(role_id)
        rights = {rm.menu_id: rm for rm in self.role_menus.for_role(role_id, session=self.db)}
        nodes: dict[int, MenuNode] = {}
        for menu in self.menus.list_active(session=self.db):
            granted = rights.get(menu.id)
            nodes[menu.id] = MenuNode(
                menu_id=menu.id,
                menu_name=menu.menu_name,
                component=menu.component,
                route=menu.route,
                menu_order=menu.menu_order,
                hide=menu.hide,
                hidetab=menu.hidetab,
                rights=RoleMenuRights(
                    can_view=granted.can_view,
                    can_create=granted.can_create,
                    can_edit=granted.can_edit,
                    can_delete=granted.can_delete,
                ) if granted else RoleMenuRights(),
                children=[],
            )
        roots: List[MenuNode] = []
        for menu in self.menus.list_active(session=self.db):
            node = nodes[menu.id]
            parent = nodes.get(menu.parent_menu_id) if menu.parent_menu_id else None
            if parent is not None:
                parent.children.append(node)
            else:
                roots.append(node)
        return roots
    
    def set_menu_rights(self, role_id: int, menu_id: int, rights: RoleMenuRights) -> dict:
        self._get(role_id)
        if self.menus.find_by_key(menu_id, session=self.db) is None:
            raise NotFoundError("Menu not found")
        with transaction(self.db):
            self.role_menus.upsert(
                role_id, menu_id, rights.model_dump(), actor=self.ctx.user_id, session=self.db
            )
        return {"role_id": role_id, "menu_id": menu_id, **rights.model_dump()}
    
    def delete_role(self, role_id: int) -> None:
        """Delete a role nobody holds; its rights go with it."""
        role = self._get(role_id)
        holders = self.db.query(User).filter(User.role_id == role_id).count()
        if holders:
            raise ConflictError(f"Role is assigned to {holders} user(s) and cannot be deleted")
        with transaction(self.db):
            self.db.delete(role)
        logger.info(f"Role {role_id} deleted by {self.ctx.user_id}")
