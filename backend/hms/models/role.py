"""Role, menu and feature permission models."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from hms.database import Base
from hms.models.mixins import AuditMixin

ADMINISTRATOR_ROLE = "Administrator"
ADMIN_ROLE_NAMES = ("Administrator", "Super Admin")


class Role(AuditMixin, Base):
    """Global role catalog entry."""
    
    __tablename__ = "roles"
    soft_delete = False
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(100), nullable=False, unique=True)
    role_description = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    users = relationship("User", back_populates="role")
    menu_rights = relationship("RoleMenu", back_populates="role", cascade="all, delete-orphan")
    feature_rights = relationship("RoleFeature", back_populates="role", cascade="all, delete-orphan")


class Menu(AuditMixin, Base):
    """Navigation entry; menus nest through parent_menu_id."""
    
    __tablename__ = "menus"
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_name = Column(String(100), nullable=False)
    component = Column(String(255), nullable=True)
    route = Column(String(255), nullable=True)
    parent_menu_id = Column(Integer, ForeignKey("menus.id"), nullable=True)
    menu_order = Column(Integer, nullable=False, default=0)
    hide = Column(Boolean, nullable=False, default=False)
    hidetab = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    
    features = relationship("Feature", back_populates="menu")


class Feature(AuditMixin, Base):
    """Capability exposed under a menu."""
    
    __tablename__ = "features"
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=True)
    feature_name = Column(String(100), nullable=False)
    feature_code = Column(String(100), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    menu = relationship("Menu", back_populates="features")


class RoleMenu(AuditMixin, Base):
    """Menu rights granted to a role."""
    
    __tablename__ = "role_menus"
    __table_args__ = (UniqueConstraint("role_id", "menu_id", name="uq_role_menu"),)
    soft_delete = False
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False)
    can_view = Column(Boolean, nullable=False, default=False)
    can_create = Column(Boolean, nullable=False, default=False)
    can_edit = Column(Boolean, nullable=False, default=False)
    can_delete = Column(Boolean, nullable=False, default=False)
    
    role = relationship("Role", back_populates="menu_rights")
    menu = relationship("Menu")


class RoleFeature(AuditMixin, Base):
    """Feature access granted to a role."""
    
    __tablename__ = "role_features"
    __table_args__ = (UniqueConstraint("role_id", "feature_id", name="uq_role_feature"),)
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    feature_id = Column(Integer, ForeignKey("features.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    
    role = relationship("Role", back_populates="feature_rights")
    feature = relationship("Feature")
