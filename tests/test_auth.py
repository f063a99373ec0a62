"""
Tests for token handling, the authorization policy table and the auth gate.
"""

import pytest
import uuid
from datetime import timedelta

from jose import jwt, JWTError

from realty.config import settings
from realty.models.admin import AdminRole
from realty.services.auth import AuthGate
from realty.utils.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password
)
from realty.utils.exceptions import (
    AuthError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError
)
from realty.utils.policy import AUTHORIZATION_POLICY, allowed_roles, SUPER_ADMIN_ONLY


PROPERTY_ITEM = "/api/properties/{property_id}"
ADMINS = "/api/admins"


def token_for(role: str, **kwargs) -> str:
    return create_access_token(
        admin_id=uuid.uuid4(),
        email="someone@example.com",
        role=role,
        **kwargs
    )


class TestTokens:
    """JWT creation and verification."""

    def test_roundtrip_claims(self):
        admin_id = uuid.uuid4()
        token = create_access_token(admin_id, "a@example.com", "editor", permissions=["listings"])

        claims = decode_access_token(token)

        assert claims.admin_id == str(admin_id)
        assert claims.email == "a@example.com"
        assert claims.role == "editor"
        assert claims.permissions == ["listings"]

    def test_default_expiry_is_configured_lifetime(self):
        token = token_for("admin")
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60

    def test_wrong_type_rejected(self):
        payload = {"sub": str(uuid.uuid4()), "email": "a@example.com", "role": "admin", "type": "refresh"}
        token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_password_hashing(self):
        hashed = hash_password("longenough")
        assert verify_password("longenough", hashed)
        assert not verify_password("different", hashed)
        assert not verify_password("", hashed)
        with pytest.raises(ValueError):
            hash_password("short")


class TestPolicyTable:
    """Route -> allowed roles."""

    def test_property_mutations_allow_any_role(self):
        for method in ("PUT", "DELETE"):
            assert allowed_roles(method, PROPERTY_ITEM) == frozenset(AdminRole)
        assert allowed_roles("post", "/api/properties") == frozenset(AdminRole)

    def test_admin_routes_are_super_admin_only(self):
        admin_entries = {key: roles for key, roles in AUTHORIZATION_POLICY.items() if key[1].startswith(ADMINS)}
        assert len(admin_entries) == 6
        assert all(roles == SUPER_ADMIN_ONLY for roles in admin_entries.values())

    def test_unknown_route_has_no_entry(self):
        assert allowed_roles("GET", "/api/properties") is None
        assert allowed_roles("POST", "/api/unknown") is None


class TestAuthGate:
    """Token verification and role checks."""

    def test_missing_token(self):
        with pytest.raises(AuthError) as exc_info:
            AuthGate.authenticate(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_expired_token(self):
        token = token_for("admin", expires_delta=timedelta(seconds=-10))
        with pytest.raises(TokenExpiredError):
            AuthGate.authenticate(token)

    def test_tampered_token(self):
        header, _, signature = token_for("viewer").split(".")
        forged_payload = token_for("super_admin").split(".")[1]
        with pytest.raises(InvalidTokenError):
            AuthGate.authenticate(".".join([header, forged_payload, signature]))

    def test_foreign_secret(self):
        payload = {
            "sub": str(uuid.uuid4()),
            "email": "a@example.com",
            "role": "super_admin",
            "type": "access",
            "exp": 4102444800,
        }
        token = jwt.encode(payload, "another-secret-key-of-sufficient-length!", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            AuthGate.authenticate(token)

    def test_unknown_role(self):
        with pytest.raises(InvalidTokenError):
            AuthGate.authenticate(token_for("owner"))

    @pytest.mark.parametrize("role", [r.value for r in AdminRole])
    def test_any_role_may_edit_properties(self, role):
        claims = AuthGate.check(token_for(role), "PUT", PROPERTY_ITEM)
        assert claims.role == role

    @pytest.mark.parametrize("role", ["admin", "editor", "viewer"])
    def test_only_super_admin_manages_admins(self, role):
        with pytest.raises(InsufficientPermissionsError) as exc_info:
            AuthGate.check(token_for(role), "GET", ADMINS)
        assert exc_info.value.status_code == 403

        assert AuthGate.check(token_for("super_admin"), "GET", ADMINS).role == "super_admin"

    def test_route_without_policy_is_denied(self):
        with pytest.raises(InsufficientPermissionsError):
            AuthGate.check(token_for("super_admin"), "GET", "/api/secret")

    def test_authentication_precedes_authorization(self):
        with pytest.raises(AuthError):
            AuthGate.check("garbage", "GET", "/api/secret")
