"""Tests for error types and constraint translation."""
import pytest
from sqlalchemy.exc import IntegrityError


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


class TestConstraintTranslation:
    """Test storage errors become application errors."""
    
    @pytest.mark.parametrize("message,field,expected", [
        ("UNIQUE constraint failed: users.email", "email", "Email already exists"),
        ("UNIQUE constraint failed: users.username", "username", "Username already exists"),
        (
            'duplicate key value violates unique constraint "employees_phone_key"',
            "phone",
            "Phone number already exists",
        ),
        (
            'duplicate key value violates unique constraint "users_username_key"\n'
            "DETAIL:  Key (username)=(emailer) already exists.",
            "username",
            "Username already exists",
        ),
        (
            'duplicate key value violates unique constraint "users_email_key"\n'
            "DETAIL:  Key (email)=(username@test.com) already exists.",
            "email",
            "Email already exists",
        ),
        (
            "Duplicate entry 'phone.email' for key 'users.username'",
            "username",
            "Username already exists",
        ),
    ])
    def test_duplicate_fields(self, message, field, expected):
        """Test known duplicate columns map to a 409 naming the field."""
        from hms.errors import ConflictError, conflict_from_integrity_error
        
        error = conflict_from_integrity_error(integrity_error(message))
        
        assert isinstance(error, ConflictError)
        assert error.status_code == 409
        assert error.field == field
        assert error.message == expected
    
    def test_unknown_duplicate(self):
        """Test other unique violations are a generic duplicate entry."""
        from hms.errors import conflict_from_integrity_error
        
        error = conflict_from_integrity_error(integrity_error("UNIQUE constraint failed: roles.role_name"))
        
        assert error.status_code == 409
        assert error.code == "DUPLICATE_ENTRY"
        assert error.message == "Duplicate entry"
    
    def test_foreign_key_violation(self):
        """Test non-unique violations are a 400."""
        from hms.errors import ValidationError, conflict_from_integrity_error
        
        error = conflict_from_integrity_error(integrity_error("FOREIGN KEY constraint failed"))
        
        assert isinstance(error, ValidationError)
        assert error.status_code == 400


class TestErrorBody:
    """Test the failure envelope."""
    
    def test_minimal(self):
        """Test only success and message are always present."""
        from hms.errors import error_body
        
        assert error_body("Nope") == {"success": False, "message": "Nope"}
    
    def test_full(self):
        """Test optional keys and extras are included when set."""
        from hms.errors import error_body
        
        body = error_body("Bad", "VALIDATION_ERROR", "email", [{"field": "email", "message": "x"}], detail=None)
        
        assert body == {
            "success": False,
            "message": "Bad",
            "code": "VALIDATION_ERROR",
            "field": "email",
            "errors": [{"field": "email", "message": "x"}],
        }
    
    def test_default_messages(self):
        """Test each error type carries its status and default message."""
        from hms.errors import (
            ForbiddenError, InvalidTokenError, NotFoundError, TokenExpiredError,
        )
        
        assert TokenExpiredError().message == "Token expired"
        assert TokenExpiredError().status_code == 401
        assert InvalidTokenError().message == "Invalid token"
        assert ForbiddenError().to_dict()["code"] == "FORBIDDEN"
        assert NotFoundError("User not found").to_dict() == {
            "success": False, "message": "User not found", "code": "NOT_FOUND",
        }


class TestUnhandledErrors:
    """Test the catch-all handler."""
    
    def test_unexpected_exception_is_500(self):
        """Test an unexpected exception renders the failure envelope."""
        from fastapi import FastAPI
        from fastapi.testclient import TestClient
        
        from hms.errors import register_exception_handlers
        
        app = FastAPI()
        register_exception_handlers(app)
        
        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")
        
        response = TestClient(app, raise_server_exceptions=False).get("/boom")
        
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal server error"
    
    def test_unknown_route_uses_envelope(self):
        """Test framework HTTP errors keep the failure envelope."""
        from fastapi import FastAPI
        from fastapi.testclient import TestClient
        
        from hms.errors import register_exception_handlers
        
        app = FastAPI()
        register_exception_handlers(app)
        
        response = TestClient(app).get("/missing")
        
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found"}
