"""Registration and authentication request schemas."""
import re

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from hms.config import get_settings

NAME_PATTERN = r"^[A-Za-z\s]+$"
PHONE_PATTERN = r"^[0-9]{10}$"
USERNAME_PATTERN = r"^[A-Za-z0-9]+$"
PASSWORD_SPECIALS = "@$!%*?&"


def check_password_strength(value: str) -> str:
    """Enforce length and character class rules on a new password."""
    min_length = get_settings().password_min_length
    if len(value) < min_length:
        raise ValueError(f"Password must be at least {min_length} characters long")
    if not (
        re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
        and any(ch in PASSWORD_SPECIALS for ch in value)
    ):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number, and one special character"
        )
    return value


class PersonFields(BaseModel):
    """Name and phone shared by every registration payload."""
    first_name: str = Field(min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: str = Field(min_length=2, max_length=50, pattern=NAME_PATTERN)
    phone: str = Field(pattern=PHONE_PATTERN)


class RegisterRequest(PersonFields):
    """Register a user, creating a company when none is given."""
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str
    company_id: int | None = Field(default=None, gt=0)
    role_id: int | None = Field(default=None, gt=0)
    branch_id: int | None = Field(default=None, gt=0)
    company_name: str | None = Field(default=None, max_length=255)
    company_email: EmailStr | None = None
    company_phone: str | None = Field(default=None, max_length=20)
    designation: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    is_doctor: bool = False

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)


class RegisterCompleteRequest(PersonFields):
    """Onboard a new company admin (or join an existing company)."""
    email: EmailStr
    password: str
    designation: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    address_line1: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    pincode: str | None = Field(default=None, max_length=20)
    company_id: int | None = Field(default=None, gt=0)
    company_name: str | None = Field(default=None, max_length=255)
    company_email: EmailStr | None = None
    company_phone: str | None = Field(default=None, max_length=20)
    branch_id: int | None = Field(default=None, gt=0)
    role_id: int | None = Field(default=None, gt=0)
    is_admin: bool = True
    is_doctor: bool = False

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)

    @field_validator("company_name")
    @classmethod
    def strip_company_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def company_name_or_id(self):
        if self.company_id is None and not self.company_name:
            raise ValueError("Company name is required when company_id is not provided")
        return self


class LoginRequest(BaseModel):
    """Login with email or username."""
    email: str = Field(min_length=1, description="Email or username")
    password: str = Field(min_length=1)


class RefreshTokenRequest(BaseModel):
    """Refresh token in the body; the cookie is checked first."""
    refreshToken: str | None = None


class ChangePasswordRequest(BaseModel):
    """Change password request."""
    currentPassword: str = Field(min_length=1)
    newPassword: str

    @field_validator("newPassword")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)


class ProfileUpdate(BaseModel):
    """Self-service profile edit; only employee name and phone are writable."""
    first_name: str | None = Field(default=None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: str | None = Field(default=None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
