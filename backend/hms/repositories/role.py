"""Role and permission catalog repositories."""
from typing import List

from sqlalchemy.orm import Session

from hms.models.role import Role, Menu, Feature, RoleMenu, RoleFeature
from hms.repositories.base import BaseRepository

FULL_RIGHTS = {"can_view": True, "can_create": True, "can_edit": True, "can_delete": True}


class RoleRepository(BaseRepository[Role]):
    model = Role

    def find_by_name(self, role_name: str, session: Session | None = None) -> Role | None:
        with self._scope(session) as db:
            return db.query(Role).filter(Role.role_name == role_name).first()


class MenuRepository(BaseRepository[Menu]):
    model = Menu

    def list_active(self, session: Session | None = None) -> List[Menu]:
        with self._scope(session) as db:
            return (
                db.query(Menu)
                .filter(Menu.is_active.is_(True))
                .order_by(Menu.menu_order, Menu.id)
                .all()
            )


class FeatureRepository(BaseRepository[Feature]):
    model = Feature

    def list_active(self, session: Session | None = None) -> List[Feature]:
        with self._scope(session) as db:
            return db.query(Feature).filter(Feature.is_active.is_(True)).order_by(Feature.id).all()


class RoleMenuRepository(BaseRepository[RoleMenu]):
    model = RoleMenu

    def upsert(
        self,
        role_id: int,
        menu_id: int,
        rights: dict[str, bool],
        actor: int | None = None,
        session: Session | None = None,
    ) -> RoleMenu:
        """Create or overwrite the rights of a role on one menu."""
        with self._scope(session) as db:
            existing = self.find_one(session=db, role_id=role_id, menu_id=menu_id)
            if existing is None:
                return self.create(
                    {"role_id": role_id, "menu_id": menu_id, **rights},
                    actor=actor,
                    session=db,
                )
            self.update(existing.id, rights, actor=actor, session=db)
            return existing

    def for_role(self, role_id: int, session: Session | None = None) -> List[RoleMenu]:
        with self._scope(session) as db:
            return db.query(RoleMenu).filter(RoleMenu.role_id == role_id).all()


class RoleFeatureRepository(BaseRepository[RoleFeature]):
    model = RoleFeature

    def upsert(
        self,
        role_id: int,
        feature_id: int,
        actor: int | None = None,
        session: Session | None = None,
    ) -> RoleFeature:
        """Grant a feature to a role, reactivating an old grant."""
        with self._scope(session) as db:
            existing = self.find_one(
                session=db, role_id=role_id, feature_id=feature_id, is_active=[True, False]
            )
            if existing is None:
                return self.create(
                    {"role_id": role_id, "feature_id": feature_id},
                    actor=actor,
                    session=db,
                )
            if not existing.is_active:
                self.update(
                    existing.id, {"is_active": True}, actor=actor, session=db, include_inactive=True
                )
            return existing

    def active_codes_for_role(self, role_id: int, session: Session | None = None) -> List[str]:
        with self._scope(session) as db:
            rows = (
                db.query(Feature.feature_code)
                .join(RoleFeature, RoleFeature.feature_id == Feature.id)
                .filter(
                    RoleFeature.role_id == role_id,
                    RoleFeature.is_active.is_(True),
                    Feature.is_active.is_(True),
                )
                .order_by(Feature.feature_code)
                .all()
            )
            return [code for (code,) in rows]
