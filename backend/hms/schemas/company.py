"""Company and branch schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyRead(BaseModel):
    """Company response."""
    id: int
    uuid: str
    company_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    is_active: bool
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class CompanyUpdate(BaseModel):
    """Update company request."""
    company_name: str | None = Field(default=None, min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)


class BranchCreate(BaseModel):
    """Create branch request."""
    branch_name: str = Field(min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)


class BranchRead(BaseModel):
    """Branch response."""
    id: int
    uuid: str
    company_id: int
    branch_name: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    is_active: bool
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class CompanyStats(BaseModel):
    """Headcount for one company."""
    branches: int
    employees: int
    doctors: int
    users: int
