"""User repository and the composite identity read."""
from typing import Any, List

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from hms.models.company import Company, Branch
from hms.models.employee import Employee
from hms.models.role import Role, Menu, RoleMenu
from hms.models.user import User, UserStatus
from hms.repositories.base import BaseRepository, Page, PageParams
from hms.repositories.role import RoleFeatureRepository
from hms.schemas.user import (
    BranchSummary, CompanySummary, EmployeeSummary, MenuRight, RoleSummary, UserDetailRead,
)


class UserRepository(BaseRepository[User]):
    model = User

    def find_by_email(self, email: str, session: Session | None = None) -> User | None:
        with self._scope(session) as db:
            return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def find_by_username(self, username: str, session: Session | None = None) -> User | None:
        with self._scope(session) as db:
            return db.query(User).filter(User.username == username).first()

    def _details_query(self, db: Session):
        return (
            db.query(User, Employee, Role, Company, Branch)
            .join(Employee, User.employee_id == Employee.id)
            .join(Role, User.role_id == Role.id)
            .join(Company, Employee.company_id == Company.id)
            .outerjoin(Branch, Employee.branch_id == Branch.id)
        )

    @staticmethod
    def _to_details(row) -> UserDetailRead:
        user, employee, role, company, branch = row
        return UserDetailRead(
            id=user.id,
            uuid=user.uuid,
            username=user.username,
            email=user.email,
            status=user.status,
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
            employee=EmployeeSummary.model_validate(employee),
            role=RoleSummary.model_validate(role),
            company=CompanySummary.model_validate(company),
            branch=BranchSummary.model_validate(branch) if branch is not None else None,
        )

    def find_user_with_employee_details(
        self,
        user_id: int,
        company_id: int | None = None,
        session: Session | None = None,
    ) -> UserDetailRead | None:
        """Denormalized identity view; restricted to one company when company_id is given."""
        with self._scope(session) as db:
            query = self._details_query(db).filter(User.id == user_id)
            if company_id is not None:
                query = query.filter(Employee.company_id == company_id)
            row = query.first()
            return self._to_details(row) if row else None

    def list_with_details(
        self,
        company_id: int,
        filters: dict[str, Any] | None = None,
        page_params: PageParams | None = None,
        session: Session | None = None,
    ) -> Page[UserDetailRead]:
        """Users of one company; filters: status, role_id, search."""
        params = (page_params or PageParams()).normalized()
        filters = filters or {}
        with self._scope(session) as db:
            query = self._details_query(db).filter(Employee.company_id == company_id)
            if filters.get("status"):
                query = query.filter(User.status == filters["status"])
            if filters.get("role_id"):
                query = query.filter(User.role_id == filters["role_id"])
            if filters.get("search"):
                term = f"%{filters['search'].lower()}%"
                query = query.filter(or_(
                    func.lower(User.username).like(term),
                    func.lower(User.email).like(term),
                    func.lower(Employee.employee_name).like(term),
                ))
            total = query.count()
            sort_column = User.id
            if params.sort_by and params.sort_by in User.__table__.columns:
                sort_column = getattr(User, params.sort_by)
            ordered = sort_column.asc() if params.sort_order == "ASC" else sort_column.desc()
            rows = (
                query.order_by(ordered)
                .offset((params.page - 1) * params.limit)
                .limit(params.limit)
                .all()
            )
            return Page(
                items=[self._to_details(row) for row in rows],
                total=total,
                page=params.page,
                limit=params.limit,
            )

    def menu_rights(self, role_id: int, session: Session | None = None) -> List[MenuRight]:
        with self._scope(session) as db:
            rows = (
                db.query(RoleMenu, Menu)
                .join(Menu, RoleMenu.menu_id == Menu.id)
                .filter(RoleMenu.role_id == role_id, Menu.is_active.is_(True))
                .order_by(Menu.menu_order, Menu.id)
                .all()
            )
            return [
                MenuRight(
                    menu_id=menu.id,
                    menu_name=menu.menu_name,
                    route=menu.route,
                    parent_menu_id=menu.parent_menu_id,
                    menu_order=menu.menu_order,
                    can_view=rights.can_view,
                    can_create=rights.can_create,
                    can_edit=rights.can_edit,
                    can_delete=rights.can_delete,
                )
                for rights, menu in rows
            ]

    def find_user_with_permissions(self, user_id: int, session: Session | None = None) -> UserDetailRead | None:
        """Identity view plus the role's menu rights and feature codes."""
        with self._scope(session) as db:
            details = self.find_user_with_employee_details(user_id, session=db)
            if details is None:
                return None
            details.menus = self.menu_rights(details.role.id, session=db)
            details.features = RoleFeatureRepository().active_codes_for_role(details.role.id, session=db)
            return details

    def statistics(self, company_id: int, session: Session | None = None) -> dict:
        """Counts by status and by role for one company."""
        with self._scope(session) as db:
            base = (
                db.query(User)
                .join(Employee, User.employee_id == Employee.id)
                .filter(Employee.company_id == company_id)
            )
            by_status = dict(
                base.with_entities(User.status, func.count(User.id)).group_by(User.status).all()
            )
            by_role = dict(
                base.join(Role, User.role_id == Role.id)
                .with_entities(Role.role_name, func.count(User.id))
                .group_by(Role.role_name)
                .all()
            )
            return {
                "total": sum(by_status.values()),
                "active": by_status.get(UserStatus.ACTIVE.value, 0),
                "inactive": by_status.get(UserStatus.INACTIVE.value, 0),
                "suspended": by_status.get(UserStatus.SUSPENDED.value, 0),
                "by_role": by_role,
            }
