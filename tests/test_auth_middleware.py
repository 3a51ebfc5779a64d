from datetime import datetime, timedelta, UTC

import pytest
from jose import jwt

from app.config import settings
from app.models.role import UserRole
from app.models.user import User
from tests.conftest import create_test_token

# One protected read endpoint per area of the API
PROTECTED_ENDPOINTS = [
    "/api/users/me",
    "/api/tenants",
    "/api/leases",
    "/api/rent-payments",
    "/api/bookings",
    "/api/properties/mine",
]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestPublicEndpoints:
    """Endpoints reachable without a token"""

    @pytest.mark.parametrize("path", ["/health", "/", "/api/properties", "/api/settings"])
    def test_no_auth_required(self, client, path):
        response = client.get(path)
        assert response.status_code == 200

    def test_health_reports_version(self, client):
        assert client.get("/health").json() == {"status": "healthy", "version": settings.APP_VERSION}

    def test_root_names_the_service(self, client):
        assert client.get("/").json()["message"] == "NyumbaLink Rental API"


class TestTokenValidation:
    """JWTs issued by the identity service"""

    @pytest.mark.parametrize("path", PROTECTED_ENDPOINTS)
    def test_valid_token_accepted(self, client, auth_headers, path):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 200

    @pytest.mark.parametrize("path", PROTECTED_ENDPOINTS)
    def test_missing_token_rejected(self, client, path):
        # HTTPBearer answers 401 when the header is absent
        assert client.get(path).status_code == 401

    def test_expired_token_rejected(self, client):
        response = client.get("/api/bookings", headers=bearer(create_test_token(expired=True)))
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_foreign_signature_rejected(self, client):
        payload = {"sub": "guest-1", "exp": datetime.now(UTC) + timedelta(minutes=15)}
        token = jwt.encode(payload, "some-other-service-key", algorithm="HS256")

        assert client.get("/api/bookings", headers=bearer(token)).status_code == 401

    def test_garbage_token_rejected(self, client):
        assert client.get("/api/leases", headers=bearer("nyumba.not.jwt")).status_code == 401

    @pytest.mark.parametrize(
        "claims, message",
        [
            ({"exp": datetime.now(UTC) + timedelta(minutes=15)}, "user identifier"),
            ({"sub": "landlord-1"}, "expiration"),
        ],
    )
    def test_required_claims(self, client, claims, message):
        token = jwt.encode({**claims, "iat": datetime.now(UTC)}, settings.SECRET_KEY, algorithm="HS256")

        response = client.get("/api/rent-payments", headers=bearer(token))
        assert response.status_code == 401
        assert message in response.json()["detail"].lower()

    def test_scheme_prefix_required(self, client):
        headers = {"Authorization": create_test_token()}
        assert client.get("/api/tenants", headers=headers).status_code == 401


class TestUserProvisioning:
    """Users are created from the token subject on first contact"""

    def test_first_request_creates_user(self, client, db_session):
        assert db_session.query(User).count() == 0

        response = client.get("/api/users/me", headers=bearer(create_test_token(user_id="guest-42")))
        assert response.status_code == 200
        assert response.json()["auth_user_id"] == "guest-42"
        assert response.json()["role"] == UserRole.USER.value

        assert db_session.query(User).filter_by(auth_user_id="guest-42").one() is not None

    def test_same_subject_reuses_user(self, client, db_session):
        headers = bearer(create_test_token(user_id="landlord-7"))
        for path in PROTECTED_ENDPOINTS:
            client.get(path, headers=headers)

        users = db_session.query(User).all()
        assert [u.auth_user_id for u in users] == ["landlord-7"]

    def test_profile_update(self, client, auth_headers):
        """Users can set the phone used for booking contact links"""
        response = client.patch(
            "/api/users/me",
            headers=auth_headers,
            json={"full_name": "Neema Mushi", "phone": "+255 754 000 111"},
        )
        assert response.status_code == 200
        assert response.json()["phone"] == "+255 754 000 111"
        assert response.json()["full_name"] == "Neema Mushi"


class TestAdminAccess:
    def test_regular_user_forbidden(self, client, auth_headers):
        assert client.get("/api/admin/stats", headers=auth_headers).status_code == 403

    def test_admin_allowed(self, client, admin_headers):
        assert client.get("/api/admin/stats", headers=admin_headers).status_code == 200
