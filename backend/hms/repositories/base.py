"""Generic CRUD repository over one mapped entity.

Every method accepts an optional ``session``. When given, the call joins
that unit of work and leaves commit/rollback to the caller; when omitted,
the repository opens its own session, commits and closes it.
"""
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Iterator, List, TypeVar

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, sessionmaker

from hms.config import get_settings
from hms.database import Base, SessionLocal
from hms.models.mixins import new_uuid

ModelT = TypeVar("ModelT", bound=Base)


@dataclass
class PageParams:
    """Requested page; out of range values are clamped."""
    page: int = 1
    limit: int | None = None
    sort_by: str | None = None
    sort_order: str = "DESC"

    def normalized(self) -> "PageParams":
        settings = get_settings()
        limit = self.limit or settings.default_page_size
        limit = max(1, min(limit, settings.max_page_size))
        order = "ASC" if (self.sort_order or "").upper() == "ASC" else "DESC"
        return PageParams(max(1, self.page or 1), limit, self.sort_by, order)


@dataclass
class Page(Generic[ModelT]):
    """One page of results plus totals."""
    items: List[ModelT]
    total: int
    page: int
    limit: int
    total_pages: int = field(init=False)
    has_next: bool = field(init=False)
    has_prev: bool = field(init=False)

    def __post_init__(self):
        self.total_pages = math.ceil(self.total / self.limit) if self.limit else 0
        self.has_next = self.page < self.total_pages
        self.has_prev = self.page > 1

    def meta(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


class BaseRepository(Generic[ModelT]):
    """CRUD for ``model``; ``soft_delete`` defaults to the model's own flag."""

    model: type[ModelT]

    def __init__(
        self,
        model: type[ModelT] | None = None,
        soft_delete: bool | None = None,
        session_factory: sessionmaker = SessionLocal,
    ):
        if model is not None:
            self.model = model
        if soft_delete is None:
            soft_delete = getattr(self.model, "soft_delete", False)
        self.supports_soft_delete = soft_delete
        self.session_factory = session_factory

    @contextmanager
    def _scope(self, session: Session | None) -> Iterator[Session]:
        if session is not None:
            yield session
            return
        db = self.session_factory(expire_on_commit=False)
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @property
    def pk(self):
        return self.model.__mapper__.primary_key[0]

    def _column(self, name: str):
        if name not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no column '{name}'")
        return getattr(self.model, name)

    def _filtered(self, db: Session, filters: dict[str, Any] | None):
        query = db.query(self.model)
        filters = dict(filters or {})
        if self.supports_soft_delete and "is_active" not in filters:
            filters["is_active"] = True
        for name, value in filters.items():
            column = self._column(name)
            if isinstance(value, (list, tuple, set)):
                query = query.filter(column.in_(list(value)))
            else:
                query = query.filter(column == value)
        return query

    def find_by_key(self, id: int, session: Session | None = None) -> ModelT | None:
        """Row by primary key; inactive rows are hidden for soft-delete entities."""
        with self._scope(session) as db:
            query = db.query(self.model).filter(self.pk == id)
            if self.supports_soft_delete:
                query = query.filter(self.model.is_active.is_(True))
            return query.first()

    def find_one(self, session: Session | None = None, **filters) -> ModelT | None:
        with self._scope(session) as db:
            return self._filtered(db, filters).first()

    def find_all(
        self,
        filters: dict[str, Any] | None = None,
        page_params: PageParams | None = None,
        session: Session | None = None,
    ) -> Page[ModelT]:
        """Filtered, sorted, paginated listing."""
        params = (page_params or PageParams()).normalized()
        with self._scope(session) as db:
            query = self._filtered(db, filters)
            total = query.count()
            sort_column = self.pk
            if params.sort_by and params.sort_by in self.model.__table__.columns:
                sort_column = getattr(self.model, params.sort_by)
            order = asc if params.sort_order == "ASC" else desc
            items = (
                query.order_by(order(sort_column))
                .offset((params.page - 1) * params.limit)
                .limit(params.limit)
                .all()
            )
            return Page(items=items, total=total, page=params.page, limit=params.limit)

    def create(
        self,
        fields: dict[str, Any],
        actor: int | None = None,
        session: Session | None = None,
    ) -> ModelT:
        """Insert a row stamped with uuid, timestamps, actor and active flag."""
        values = dict(fields)
        now = datetime.utcnow()
        columns = self.model.__table__.columns
        stamps = {
            "uuid": new_uuid(),
            "created_at": now,
            "updated_at": now,
            "created_by": actor,
            "updated_by": actor,
            "is_active": True,
        }
        for name, value in stamps.items():
            if name in columns:
                values.setdefault(name, value)
        with self._scope(session) as db:
            obj = self.model(**values)
            db.add(obj)
            db.flush()
            return obj

    def update(
        self,
        id: int,
        fields: dict[str, Any],
        actor: int | None = None,
        session: Session | None = None,
        include_inactive: bool = False,
    ) -> bool:
        """Apply partial fields; False when no row matched.

        Soft-deleted rows only match with ``include_inactive``.
        """
        with self._scope(session) as db:
            obj = db.get(self.model, id)
            if obj is None:
                return False
            if self.supports_soft_delete and not include_inactive and not obj.is_active:
                return False
            for name, value in fields.items():
                self._column(name)
                setattr(obj, name, value)
            columns = self.model.__table__.columns
            if "updated_at" in columns:
                obj.updated_at = datetime.utcnow()
            if "updated_by" in columns and actor is not None:
                obj.updated_by = actor
            db.flush()
            return True

    def soft_delete(
        self,
        id: int,
        actor: int | None = None,
        session: Session | None = None,
    ) -> bool:
        """Flip the active flag off."""
        if not self.supports_soft_delete:
            raise TypeError(f"{self.model.__name__} does not support soft delete")
        return self.update(id, {"is_active": False}, actor=actor, session=session)

    def hard_delete(self, id: int, session: Session | None = None) -> bool:
        with self._scope(session) as db:
            obj = db.get(self.model, id)
            if obj is None:
                return False
            db.delete(obj)
            db.flush()
            return True

    def exists_by_filter(
        self,
        filters: dict[str, Any],
        exclude_id: int | None = None,
        session: Session | None = None,
    ) -> bool:
        """Uniqueness pre-check; inactive rows count as taken."""
        with self._scope(session) as db:
            query = db.query(self.model)
            for name, value in filters.items():
                query = query.filter(self._column(name) == value)
            if exclude_id is not None:
                query = query.filter(self.pk != exclude_id)
            return db.query(query.exists()).scalar()

    def count(self, filters: dict[str, Any] | None = None, session: Session | None = None) -> int:
        with self._scope(session) as db:
            return self._filtered(db, filters).count()
