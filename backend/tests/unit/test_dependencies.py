"""Tests for the authentication and authorization dependencies."""
import asyncio

import pytest


def make_context(**overrides):
    from hms.context import AuthContext
    
    values = dict(
        user_id=1,
        user_uuid="u-1",
        employee_id=2,
        employee_uuid="e-2",
        role_id=3,
        role_name="Doctor",
        company_id=4,
        branch_id=5,
    )
    values.update(overrides)
    return AuthContext(**values)


def access_header(**overrides):
    from hms.security import TokenClaims, TokenKind, issue_token
    
    values = dict(
        user_id=1,
        user_uuid="u-1",
        employee_id=2,
        employee_uuid="e-2",
        employee_name="Test Person",
        role_id=3,
        role_name="Doctor",
        company_id=4,
        company_name="Test Hospital",
    )
    values.update(overrides)
    return f"Bearer {issue_token(TokenClaims(**values), TokenKind.ACCESS)}"


class TestBearerExtraction:
    """Test reading the Authorization header."""
    
    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "bearer abc"])
    def test_missing_or_malformed(self, header):
        """Test anything but a Bearer token is No token provided."""
        from hms.dependencies import extract_bearer_token
        from hms.errors import UnauthorizedError
        
        with pytest.raises(UnauthorizedError, match="No token provided"):
            extract_bearer_token(header)
    
    def test_extracts_token(self):
        """Test the token after the scheme is returned."""
        from hms.dependencies import extract_bearer_token
        
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


class TestAuthenticate:
    """Test access token verification into a context."""
    
    def test_valid_token(self):
        """Test a valid access token yields the caller context."""
        from hms.dependencies import authenticate
        
        ctx = asyncio.run(authenticate(access_header(branch_id=9, is_doctor=True)))
        
        assert ctx.user_id == 1
        assert ctx.company_id == 4
        assert ctx.branch_id == 9
        assert ctx.is_doctor is True
        assert ctx.is_admin is False
    
    def test_refresh_token_rejected(self):
        """Test a refresh token cannot authenticate a request."""
        from hms.dependencies import authenticate
        from hms.errors import UnauthorizedError
        from hms.security import TokenClaims, TokenKind, issue_token
        
        claims = TokenClaims(
            user_id=1, user_uuid="u-1", employee_id=2, employee_uuid="e-2",
            employee_name="Test Person", role_id=3, role_name="Doctor",
            company_id=4, company_name="Test Hospital",
        )
        header = f"Bearer {issue_token(claims, TokenKind.REFRESH)}"
        
        with pytest.raises(UnauthorizedError):
            asyncio.run(authenticate(header))
    
    def test_optional_auth(self):
        """Test optional auth returns None instead of raising."""
        from hms.dependencies import optional_auth
        
        assert asyncio.run(optional_auth(None)) is None
        assert asyncio.run(optional_auth("Bearer garbage")) is None
        assert asyncio.run(optional_auth(access_header())).user_id == 1


class TestGuards:
    """Test role, company and branch guards."""
    
    def test_require_role(self):
        """Test role id matching."""
        from hms.dependencies import require_role
        from hms.errors import ForbiddenError
        
        ctx = make_context(role_id=3)
        
        assert asyncio.run(require_role(3)(ctx)) is ctx
        with pytest.raises(ForbiddenError, match="Insufficient role permissions"):
            asyncio.run(require_role(1)(ctx))
    
    def test_require_role_name(self):
        """Test any listed role name passes."""
        from hms.dependencies import require_role_name
        from hms.errors import ForbiddenError
        
        admin = make_context(role_name="Super Admin")
        
        assert asyncio.run(require_role_name("Administrator", "Super Admin")(admin)) is admin
        with pytest.raises(ForbiddenError):
            asyncio.run(require_role_name("Administrator")(make_context()))
    
    def test_require_company(self):
        """Test the company pin, and no pin means any company."""
        from hms.dependencies import require_company
        from hms.errors import ForbiddenError
        
        ctx = make_context(company_id=4)
        
        assert asyncio.run(require_company()(ctx)) is ctx
        assert asyncio.run(require_company(4)(ctx)) is ctx
        with pytest.raises(ForbiddenError, match="Access denied to this company"):
            asyncio.run(require_company(5)(ctx))
    
    def test_require_branch(self):
        """Test the branch pin."""
        from hms.dependencies import require_branch
        from hms.errors import ForbiddenError
        
        ctx = make_context(branch_id=5)
        
        assert asyncio.run(require_branch(5)(ctx)) is ctx
        with pytest.raises(ForbiddenError, match="Access denied to this branch"):
            asyncio.run(require_branch(6)(ctx))
