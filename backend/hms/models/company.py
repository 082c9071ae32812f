"""Company (tenant root) and branch models."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from hms.database import Base
from hms.models.mixins import AuditMixin

DEFAULT_BRANCH_NAME = "Default Branch"


class Company(AuditMixin, Base):
    """Tenant boundary for branches, employees and users."""
    
    __tablename__ = "companies"
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    branches = relationship("Branch", back_populates="company")
    employees = relationship("Employee", back_populates="company")


class Branch(AuditMixin, Base):
    """Physical site of a company."""
    
    __tablename__ = "branches"
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    branch_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    company = relationship("Company", back_populates="branches")
