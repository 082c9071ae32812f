"""User (login identity) model."""
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from hms.database import Base
from hms.models.mixins import AuditMixin


class UserStatus(str, Enum):
    """Account lifecycle states."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class User(AuditMixin, Base):
    """Login identity bound to one employee and one role."""
    
    __tablename__ = "users"
    # status column replaces an is_active flag
    soft_delete = False
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, unique=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    status = Column(
        SQLEnum('active', 'inactive', 'suspended', name='userstatus'),
        nullable=False,
        default=UserStatus.ACTIVE.value,
    )
    expiry_minutes = Column(Integer, nullable=True)
    last_login = Column(DateTime, nullable=True)
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime, nullable=True)
    
    # Relationships
    employee = relationship("Employee", back_populates="user")
    role = relationship("Role", back_populates="users")
