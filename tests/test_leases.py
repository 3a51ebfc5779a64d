from datetime import date, timedelta

import pytest

from tests.conftest import headers_for, tenant_payload


@pytest.fixture
def independent_tenant(client, user_a_headers, approved_property):
    """Independent tenant of user A with its draft lease"""
    return client.post(
        "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
    ).json()


@pytest.fixture
def linked_tenant(client, user_a_headers, approved_property, user_b):
    """Tenant of user A linked to user B's account"""
    payload = tenant_payload(approved_property.id, user_id=user_b.id)
    del payload["tenant_name"]
    return client.post("/api/tenants", headers=user_a_headers, json=payload).json()


def sign(client, lease_id, role, headers):
    return client.post(f"/api/leases/{lease_id}/sign", headers=headers, json={"role": role})


class TestLeaseSigning:
    """Signature-driven lease status"""

    def test_landlord_then_tenant(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]

        first = sign(client, lease_id, "landlord", user_a_headers)
        assert first.status_code == 200
        assert first.json()["status"] == "pending_signature"
        assert first.json()["landlord_signed"] is True
        assert first.json()["landlord_signature_date"] is not None
        assert first.json()["tenant_signed"] is False

        second = sign(client, lease_id, "tenant", user_a_headers)
        assert second.status_code == 200
        assert second.json()["status"] == "active"
        assert second.json()["tenant_signature_date"] is not None

    def test_tenant_first(self, client, user_a_headers, independent_tenant):
        """Either party may sign first"""
        response = sign(client, independent_tenant["lease_id"], "tenant", user_a_headers)
        assert response.json()["status"] == "pending_signature"

    def test_double_signature_rejected(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]
        sign(client, lease_id, "landlord", user_a_headers)

        response = sign(client, lease_id, "landlord", user_a_headers)
        assert response.status_code == 409

    def test_linked_tenant_signs_for_themselves(
        self, client, user_a_headers, user_b_headers, linked_tenant
    ):
        lease_id = linked_tenant["lease_id"]

        # The landlord cannot sign on behalf of a tenant with an account
        assert sign(client, lease_id, "tenant", user_a_headers).status_code == 403
        # The tenant cannot sign as landlord
        assert sign(client, lease_id, "landlord", user_b_headers).status_code == 403

        response = sign(client, lease_id, "tenant", user_b_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "pending_signature"

        response = sign(client, lease_id, "landlord", user_a_headers)
        assert response.json()["status"] == "active"

    def test_linked_tenant_can_view_lease(self, client, user_b_headers, linked_tenant):
        response = client.get(f"/api/leases/{linked_tenant['lease_id']}", headers=user_b_headers)
        assert response.status_code == 200

    def test_stranger_cannot_view_lease(self, client, independent_tenant):
        response = client.get(
            f"/api/leases/{independent_tenant['lease_id']}", headers=headers_for("stranger")
        )
        assert response.status_code == 404

    def test_sign_terminated_lease_rejected(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]
        client.post(f"/api/leases/{lease_id}/terminate", headers=user_a_headers)

        response = sign(client, lease_id, "landlord", user_a_headers)
        assert response.status_code == 409

    def test_invalid_role_rejected(self, client, user_a_headers, independent_tenant):
        response = sign(client, independent_tenant["lease_id"], "witness", user_a_headers)
        assert response.status_code == 422


class TestLeaseEditing:
    def test_update_while_draft(self, client, user_a_headers, independent_tenant):
        response = client.patch(
            f"/api/leases/{independent_tenant['lease_id']}",
            headers=user_a_headers,
            json={
                "special_clauses": "No pets",
                "utilities_included": ["water", "garbage"],
                "late_fee_amount": 20000,
            },
        )
        assert response.status_code == 200
        assert response.json()["special_clauses"] == "No pets"
        assert response.json()["utilities_included"] == ["water", "garbage"]
        assert response.json()["status"] == "draft"

    def test_update_while_pending_signature(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]
        sign(client, lease_id, "landlord", user_a_headers)

        response = client.patch(
            f"/api/leases/{lease_id}", headers=user_a_headers, json={"rent_due_day": 5}
        )
        assert response.status_code == 200
        assert response.json()["rent_due_day"] == 5

    def test_update_active_lease_rejected(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]
        sign(client, lease_id, "landlord", user_a_headers)
        sign(client, lease_id, "tenant", user_a_headers)

        response = client.patch(
            f"/api/leases/{lease_id}", headers=user_a_headers, json={"monthly_rent": 1}
        )
        assert response.status_code == 409

    def test_status_not_writable(self, client, user_a_headers, independent_tenant):
        """Unknown fields like status are ignored by the update schema"""
        response = client.patch(
            f"/api/leases/{independent_tenant['lease_id']}",
            headers=user_a_headers,
            json={"status": "active"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    def test_update_end_before_start_rejected(self, client, user_a_headers, independent_tenant):
        response = client.patch(
            f"/api/leases/{independent_tenant['lease_id']}",
            headers=user_a_headers,
            json={"end_date": "2025-01-01"},
        )
        assert response.status_code == 400

    def test_other_landlord_cannot_update(self, client, user_b_headers, independent_tenant):
        response = client.patch(
            f"/api/leases/{independent_tenant['lease_id']}",
            headers=user_b_headers,
            json={"special_clauses": "x"},
        )
        assert response.status_code == 404


class TestLeaseLifecycle:
    def test_create_standalone_lease(self, client, user_a_headers, independent_tenant):
        response = client.post(
            "/api/leases",
            headers=user_a_headers,
            json={
                "tenant_id": independent_tenant["tenant"]["id"],
                "agreement_type": "month-to-month",
                "start_date": "2027-01-01",
                "end_date": "2027-12-31",
                "monthly_rent": 420000,
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["agreement_type"] == "month-to-month"
        assert data["property_id"] == independent_tenant["tenant"]["property_id"]
        assert data["rent_due_day"] == 1
        assert data["late_fee_grace_period"] == 5

    def test_create_lease_for_unknown_tenant(self, client, user_a_headers):
        response = client.post(
            "/api/leases",
            headers=user_a_headers,
            json={
                "tenant_id": 999,
                "start_date": "2027-01-01",
                "end_date": "2027-12-31",
                "monthly_rent": 1,
            },
        )
        assert response.status_code == 404

    def test_terminate(self, client, user_a_headers, independent_tenant):
        lease_id = independent_tenant["lease_id"]

        response = client.post(f"/api/leases/{lease_id}/terminate", headers=user_a_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "terminated"

        again = client.post(f"/api/leases/{lease_id}/terminate", headers=user_a_headers)
        assert again.status_code == 409

    def test_expire_leases(self, client, user_a_headers, approved_property):
        """Active leases past their end date become expired"""
        past = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                lease_start_date=date(2024, 1, 1),
                lease_end_date=date(2024, 12, 31),
            ),
        ).json()
        current = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                tenant_name="Current",
                lease_start_date=date.today() - timedelta(days=30),
                lease_end_date=date.today() + timedelta(days=300),
            ),
        ).json()
        for lease_id in (past["lease_id"], current["lease_id"]):
            sign(client, lease_id, "landlord", user_a_headers)
            sign(client, lease_id, "tenant", user_a_headers)

        response = client.post("/api/leases/expire", headers=user_a_headers)
        assert response.json() == {"expired": 1}

        assert client.get(f"/api/leases/{past['lease_id']}", headers=user_a_headers).json()["status"] == "expired"
        assert client.get(f"/api/leases/{current['lease_id']}", headers=user_a_headers).json()["status"] == "active"

        # Nothing left to expire
        assert client.post("/api/leases/expire", headers=user_a_headers).json() == {"expired": 0}

    def test_list_filter_by_status(self, client, user_a_headers, independent_tenant, approved_property):
        other = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(approved_property.id, tenant_name="Other"),
        ).json()
        sign(client, other["lease_id"], "landlord", user_a_headers)

        everything = client.get("/api/leases", headers=user_a_headers).json()
        assert everything["total"] == 2

        pending = client.get("/api/leases?status=pending_signature", headers=user_a_headers).json()
        assert [lease["id"] for lease in pending["leases"]] == [other["lease_id"]]

    def test_stats(self, client, user_a_headers, approved_property):
        today = date.today()
        leases = {}
        for name, start, end in [
            ("ending", today - timedelta(days=300), today + timedelta(days=10)),
            ("long", today - timedelta(days=10), today + timedelta(days=400)),
            ("draft", today, today + timedelta(days=365)),
        ]:
            leases[name] = client.post(
                "/api/tenants",
                headers=user_a_headers,
                json=tenant_payload(
                    approved_property.id, tenant_name=name, lease_start_date=start, lease_end_date=end
                ),
            ).json()["lease_id"]

        for name in ("ending", "long"):
            sign(client, leases[name], "landlord", user_a_headers)
            sign(client, leases[name], "tenant", user_a_headers)
        client.post(f"/api/leases/{leases['long']}/terminate", headers=user_a_headers)

        stats = client.get("/api/leases/stats", headers=user_a_headers).json()
        assert stats == {
            "total": 3,
            "active": 1,
            "draft": 1,
            "pending_signature": 0,
            "expiring_soon": 1,
            "expired": 1,
        }
