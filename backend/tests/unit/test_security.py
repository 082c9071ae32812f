"""Tests for password hashing and the token codec."""
from datetime import datetime, timedelta

import pytest
from jose import jwt


def make_claims(**overrides):
    from hms.security import TokenClaims
    
    values = dict(
        user_id=7,
        user_uuid="u-7",
        employee_id=11,
        employee_uuid="e-11",
        employee_name="Ada Lovelace",
        role_id=1,
        role_name="Administrator",
        company_id=3,
        company_name="Acme Hospital",
        branch_id=5,
        branch_name="Default Branch",
        is_doctor=True,
    )
    values.update(overrides)
    return TokenClaims(**values)


class TestPasswordHashing:
    """Test bcrypt hashing helpers."""
    
    def test_hash_and_verify(self):
        """Test a hash verifies only the original password."""
        from hms.security import hash_password, verify_password
        
        hashed = hash_password("Secret@123")
        
        assert hashed != "Secret@123"
        assert verify_password("Secret@123", hashed)
        assert not verify_password("Secret@124", hashed)
    
    def test_hashes_are_salted(self):
        """Test two hashes of one password differ."""
        from hms.security import hash_password
        
        assert hash_password("Secret@123") != hash_password("Secret@123")
    
    def test_malformed_hash_does_not_verify(self):
        """Test garbage stored hashes are rejected instead of raising."""
        from hms.security import verify_password
        
        assert verify_password("Secret@123", "not-a-bcrypt-hash") is False


class TestTokenCodec:
    """Test issuing and verifying tokens."""
    
    def test_access_round_trip(self):
        """Test claims survive an access token round trip."""
        from hms.security import TokenKind, issue_token, verify_token
        
        claims = make_claims()
        token = issue_token(claims, TokenKind.ACCESS)
        decoded = verify_token(token, TokenKind.ACCESS)
        
        assert decoded.user_id == 7
        assert decoded.company_id == 3
        assert decoded.role_id == 1
        assert decoded.role_name == "Administrator"
        assert decoded.branch_id == 5
        assert decoded.is_doctor is True
    
    def test_refresh_round_trip(self):
        """Test refresh tokens verify as refresh tokens."""
        from hms.security import TokenKind, issue_token, verify_token
        
        token = issue_token(make_claims(), TokenKind.REFRESH)
        
        assert verify_token(token, TokenKind.REFRESH).user_uuid == "u-7"
    
    def test_access_token_rejected_as_refresh(self):
        """Test kinds are not interchangeable."""
        from hms.errors import InvalidTokenError
        from hms.security import TokenKind, issue_token, verify_token
        
        access = issue_token(make_claims(), TokenKind.ACCESS)
        refresh = issue_token(make_claims(), TokenKind.REFRESH)
        
        with pytest.raises(InvalidTokenError):
            verify_token(access, TokenKind.REFRESH)
        with pytest.raises(InvalidTokenError):
            verify_token(refresh, TokenKind.ACCESS)
    
    def test_expired_token(self):
        """Test an expired token raises TokenExpiredError."""
        from hms.errors import TokenExpiredError
        from hms.security import TokenKind, issue_token, verify_token
        
        issued = datetime.utcnow() - timedelta(hours=1)
        token = issue_token(make_claims(), TokenKind.ACCESS, now=issued)
        
        with pytest.raises(TokenExpiredError) as exc_info:
            verify_token(token, TokenKind.ACCESS)
        assert exc_info.value.message == "Token expired"
        assert exc_info.value.status_code == 401
    
    def test_wrong_audience_and_issuer(self, other_settings):
        """Test tokens from another issuer/audience are invalid."""
        from hms.errors import InvalidTokenError
        from hms.security import TokenKind, issue_token, verify_token
        
        token = issue_token(make_claims(), TokenKind.ACCESS, settings=other_settings)
        
        with pytest.raises(InvalidTokenError):
            verify_token(token, TokenKind.ACCESS)
    
    def test_malformed_token(self):
        """Test garbage input is an invalid token."""
        from hms.errors import InvalidTokenError
        from hms.security import TokenKind, verify_token
        
        with pytest.raises(InvalidTokenError):
            verify_token("not.a.token", TokenKind.ACCESS)
    
    def test_missing_claims_are_reported(self, settings):
        """Test a signed token without identity claims is rejected by name."""
        from hms.errors import InvalidTokenError
        from hms.security import TokenKind, verify_token
        
        payload = {
            "sub": "7",
            "user_id": 7,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "exp": datetime.utcnow() + timedelta(minutes=5),
        }
        token = jwt.encode(payload, settings.jwt_access_secret, algorithm=settings.jwt_algorithm)
        
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_token(token, TokenKind.ACCESS)
        assert "missing fields" in exc_info.value.message
        assert "company_id" in exc_info.value.message
    
    def test_tokens_are_unique(self):
        """Test two issuances in the same instant still differ."""
        from hms.security import TokenKind, issue_token
        
        now = datetime.utcnow()
        first = issue_token(make_claims(), TokenKind.REFRESH, now=now)
        second = issue_token(make_claims(), TokenKind.REFRESH, now=now)
        
        assert first != second
    
    def test_token_pair_expiry(self, settings):
        """Test the pair carries the access expiry."""
        from hms.security import issue_token_pair
        
        before = datetime.utcnow()
        pair = issue_token_pair(make_claims())
        
        assert set(pair) == {"token", "refreshToken", "expiresAt"}
        expected = before + timedelta(minutes=settings.access_token_expire_minutes)
        assert abs((pair["expiresAt"] - expected).total_seconds()) < 5
