"""Employee models."""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from hms.database import Base
from hms.models.mixins import AuditMixin


class Employee(AuditMixin, Base):
    """Staff member of a company, optionally pinned to a branch."""
    
    __tablename__ = "employees"
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True)
    employee_code = Column(String(50), nullable=True)
    employee_name = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(20), nullable=True)
    designation = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    date_of_joining = Column(Date, nullable=True)
    is_doctor = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    company = relationship("Company", back_populates="employees")
    branch = relationship("Branch")
    user = relationship("User", back_populates="employee", uselist=False)
    branch_links = relationship("EmployeeBranch", back_populates="employee")


class EmployeeBranch(AuditMixin, Base):
    """Branches an employee works at."""
    
    __tablename__ = "employee_branches"
    __table_args__ = (UniqueConstraint("employee_id", "branch_id", name="uq_employee_branch"),)
    soft_delete = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    
    employee = relationship("Employee", back_populates="branch_links")
    branch = relationship("Branch")


class EmployeeFile(Base):
    """Uploaded employee document; removed physically."""
    
    __tablename__ = "employee_files"
    soft_delete = False
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)
