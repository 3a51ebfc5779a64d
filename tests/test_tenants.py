from datetime import date

import pytest
from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError

from app.models.lease import LeaseAgreement, LeaseStatus
from app.models.rent_payment import RentPayment
from app.models.tenant import IndependentTenant, LinkedTenant, Tenant
from app.services.rent_payment_service import RentPaymentService
from tests.conftest import make_property, tenant_payload


def current_month_start() -> date:
    return date.today().replace(day=1)


class TestCreateTenant:
    """Tenant + draft lease + rent schedule cascade"""

    def test_create_tenant_cascade(self, client, user_a_headers, approved_property, db_session):
        """Creating a tenant creates a draft lease and one payment row per month"""
        response = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["payment_schedule_created"] is True
        assert data["payments_created"] == 12
        assert data["tenant"]["status"] == "active"
        assert data["tenant"]["identity"] == {
            "kind": "independent",
            "name": "Amina Juma",
            "phone": "+255 712 345 678",
            "email": None,
        }

        lease = db_session.get(LeaseAgreement, data["lease_id"])
        assert lease.status == LeaseStatus.DRAFT
        assert lease.rent_due_day == 1
        assert lease.late_fee_grace_period == 5
        assert float(lease.late_fee_amount) == 0
        assert float(lease.monthly_rent) == 400000

    def test_schedule_rows(self, client, user_a_headers, approved_property, db_session):
        """Rows cover every month with the due day clamped to month end"""
        response = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                lease_start_date=date(2026, 1, 15),
                lease_end_date=date(2026, 4, 10),
                rent_due_day=31,
            ),
        )
        tenant_id = response.json()["tenant"]["id"]

        rows = (
            db_session.query(RentPayment)
            .filter(RentPayment.tenant_id == tenant_id)
            .order_by(RentPayment.payment_month)
            .all()
        )
        assert [r.payment_month for r in rows] == [
            date(2026, 1, 1),
            date(2026, 2, 1),
            date(2026, 3, 1),
            date(2026, 4, 1),
        ]
        assert [r.due_date for r in rows] == [
            date(2026, 1, 31),
            date(2026, 2, 28),
            date(2026, 3, 31),
            date(2026, 4, 30),
        ]
        assert all(r.status.value == "pending" for r in rows)
        assert all(float(r.amount_due) == 400000 for r in rows)

    def test_linked_tenant_identity(self, client, user_a_headers, approved_property, user_b):
        """A tenant linked to an account reads contact details from the user"""
        payload = tenant_payload(approved_property.id, user_id=user_b.id)
        del payload["tenant_name"]
        del payload["tenant_phone"]

        response = client.post("/api/tenants", headers=user_a_headers, json=payload)

        assert response.status_code == 201
        identity = response.json()["tenant"]["identity"]
        assert identity["kind"] == "linked"
        assert identity["user_id"] == user_b.id
        assert identity["full_name"] == "Guest B"
        assert identity["phone"] == "+255 700 333 444"

    def test_tenant_model_relationships(
        self, client, user_a_headers, approved_property, user_b, db_session
    ):
        """Rented listing and identity variant are both reachable on the model"""
        independent = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()["tenant"]
        payload = tenant_payload(approved_property.id, user_id=user_b.id)
        del payload["tenant_name"]
        linked = client.post("/api/tenants", headers=user_a_headers, json=payload).json()["tenant"]

        tenant = db_session.get(Tenant, independent["id"])
        assert tenant.rented_property.title == "Sea View Apartment"
        assert tenant.identity == IndependentTenant(
            name="Amina Juma", phone="+255 712 345 678", email=None
        )

        tenant = db_session.get(Tenant, linked["id"])
        assert isinstance(tenant.identity, LinkedTenant)
        assert tenant.identity.full_name == "Guest B"

    def test_linked_tenant_unknown_user(self, client, user_a_headers, approved_property):
        payload = tenant_payload(approved_property.id, user_id=9999)
        del payload["tenant_name"]

        response = client.post("/api/tenants", headers=user_a_headers, json=payload)
        assert response.status_code == 400

    def test_both_identities_rejected(self, client, user_a_headers, approved_property, user_b):
        """user_id and tenant_name are mutually exclusive"""
        response = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(approved_property.id, user_id=user_b.id),
        )
        assert response.status_code == 422

    def test_no_identity_rejected(self, client, user_a_headers, approved_property):
        payload = tenant_payload(approved_property.id)
        del payload["tenant_name"]

        response = client.post("/api/tenants", headers=user_a_headers, json=payload)
        assert response.status_code == 422

    def test_end_before_start_rejected(self, client, user_a_headers, approved_property):
        response = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                lease_start_date=date(2026, 6, 1),
                lease_end_date=date(2026, 6, 1),
            ),
        )
        assert response.status_code == 422

    def test_negative_rent_rejected(self, client, user_a_headers, approved_property):
        response = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(approved_property.id, monthly_rent=-1),
        )
        assert response.status_code == 422

    def test_pending_property_rejected(self, client, user_a_headers, pending_property):
        """Tenants can only be added to approved properties"""
        response = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(pending_property.id)
        )
        assert response.status_code == 400

    def test_other_hosts_property_not_found(self, client, user_b_headers, approved_property):
        response = client.post(
            "/api/tenants", headers=user_b_headers, json=tenant_payload(approved_property.id)
        )
        assert response.status_code == 404

    def test_schedule_failure_keeps_tenant(
        self, client, user_a_headers, approved_property, db_session, monkeypatch
    ):
        """A failed schedule is reported, the tenant and lease survive, and it can be retried"""

        def failing_schedule(self, tenant, rent_due_day):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(RentPaymentService, "create_payment_schedule", failing_schedule)
        response = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["payment_schedule_created"] is False
        assert data["payments_created"] == 0
        assert db_session.get(LeaseAgreement, data["lease_id"]) is not None
        assert db_session.query(RentPayment).count() == 0

        monkeypatch.undo()
        tenant_id = data["tenant"]["id"]
        retry = client.post(f"/api/tenants/{tenant_id}/payment-schedule", headers=user_a_headers)
        assert retry.status_code == 200
        assert retry.json() == {"tenant_id": tenant_id, "payments_created": 12}

    def test_regenerate_skips_existing_months(
        self, client, user_a_headers, approved_property, db_session
    ):
        response = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        )
        tenant_id = response.json()["tenant"]["id"]

        # Remove two months, regenerate only those
        rows = db_session.query(RentPayment).filter(RentPayment.tenant_id == tenant_id).limit(2).all()
        for row in rows:
            db_session.delete(row)
        db_session.commit()

        retry = client.post(f"/api/tenants/{tenant_id}/payment-schedule", headers=user_a_headers)
        assert retry.json()["payments_created"] == 2
        assert db_session.query(RentPayment).filter(RentPayment.tenant_id == tenant_id).count() == 12


class TestTenantQueries:
    """Listing, lookup and landlord isolation"""

    def test_list_and_get(self, client, user_a_headers, approved_property):
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()

        listing = client.get("/api/tenants", headers=user_a_headers).json()
        assert listing["total"] == 1
        assert listing["tenants"][0]["id"] == created["tenant"]["id"]

        detail = client.get(f"/api/tenants/{created['tenant']['id']}", headers=user_a_headers)
        assert detail.status_code == 200
        assert "is_late_on_rent" in detail.json()

    def test_other_landlord_cannot_see_tenant(
        self, client, user_a_headers, user_b_headers, approved_property
    ):
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()

        response = client.get(f"/api/tenants/{created['tenant']['id']}", headers=user_b_headers)
        assert response.status_code == 404
        assert client.get("/api/tenants", headers=user_b_headers).json()["total"] == 0

    def test_filter_by_property(self, client, user_a_headers, approved_property, user_a, db_session):
        other = make_property(db_session, user_a, title="Second House")
        client.post("/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id))
        client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(other.id, tenant_name="Baraka"),
        )

        response = client.get(f"/api/tenants?property_id={other.id}", headers=user_a_headers)
        tenants = response.json()["tenants"]
        assert len(tenants) == 1
        assert tenants[0]["identity"]["name"] == "Baraka"

    def test_overdue_filter(self, client, user_a_headers, approved_property):
        """payment_status=overdue keeps tenants with unpaid rows past due"""
        start = current_month_start() - relativedelta(months=3)
        late = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                tenant_name="Late Tenant",
                lease_start_date=start,
                lease_end_date=start + relativedelta(months=12),
            ),
        ).json()
        future = current_month_start() + relativedelta(months=2)
        client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                tenant_name="Future Tenant",
                lease_start_date=future,
                lease_end_date=future + relativedelta(months=12),
            ),
        )

        everyone = client.get("/api/tenants", headers=user_a_headers).json()
        flags = {t["identity"]["name"]: t["is_late_on_rent"] for t in everyone["tenants"]}
        assert flags == {"Late Tenant": True, "Future Tenant": False}

        overdue = client.get("/api/tenants?payment_status=overdue", headers=user_a_headers).json()
        assert [t["id"] for t in overdue["tenants"]] == [late["tenant"]["id"]]

    def test_paid_rows_not_late(self, client, user_a_headers, approved_property):
        """Fully paid past months do not make a tenant late"""
        start = current_month_start() - relativedelta(months=1)
        created = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(
                approved_property.id,
                lease_start_date=start,
                lease_end_date=start + relativedelta(months=1, days=-1),
            ),
        ).json()
        tenant_id = created["tenant"]["id"]

        client.post(
            "/api/rent-payments/record",
            headers=user_a_headers,
            json={"tenant_id": tenant_id, "payment_month": str(start), "amount_paid": 400000},
        )

        detail = client.get(f"/api/tenants/{tenant_id}", headers=user_a_headers).json()
        assert detail["is_late_on_rent"] is False

    def test_unsupported_payment_status_filter(self, client, user_a_headers):
        response = client.get("/api/tenants?payment_status=paid", headers=user_a_headers)
        assert response.status_code == 400


class TestTenantUpdates:
    def test_update_tenant(self, client, user_a_headers, approved_property):
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()
        tenant_id = created["tenant"]["id"]

        response = client.patch(
            f"/api/tenants/{tenant_id}",
            headers=user_a_headers,
            json={"emergency_contact_name": "Juma Ali", "tenant_phone": "+255 655 000 000"},
        )
        assert response.status_code == 200
        assert response.json()["emergency_contact_name"] == "Juma Ali"
        assert response.json()["identity"]["phone"] == "+255 655 000 000"

    def test_linked_tenant_contact_not_editable(
        self, client, user_a_headers, approved_property, user_b
    ):
        payload = tenant_payload(approved_property.id, user_id=user_b.id)
        del payload["tenant_name"]
        tenant_id = client.post("/api/tenants", headers=user_a_headers, json=payload).json()[
            "tenant"
        ]["id"]

        response = client.patch(
            f"/api/tenants/{tenant_id}", headers=user_a_headers, json={"tenant_phone": "123"}
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("name", [None, "   "])
    def test_independent_tenant_name_required(
        self, client, user_a_headers, approved_property, name
    ):
        tenant_id = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()["tenant"]["id"]

        response = client.patch(
            f"/api/tenants/{tenant_id}", headers=user_a_headers, json={"tenant_name": name}
        )
        assert response.status_code == 400

        tenant = client.get(f"/api/tenants/{tenant_id}", headers=user_a_headers).json()
        assert tenant["identity"]["name"] == "Amina Juma"

    def test_rename_independent_tenant(self, client, user_a_headers, approved_property):
        tenant_id = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()["tenant"]["id"]

        response = client.patch(
            f"/api/tenants/{tenant_id}",
            headers=user_a_headers,
            json={"tenant_name": "  Amina J. Mushi "},
        )
        assert response.status_code == 200
        assert response.json()["identity"]["name"] == "Amina J. Mushi"

    def test_end_tenancy(self, client, user_a_headers, approved_property, db_session):
        """Ending a tenancy terminates its active lease and keeps rent rows"""
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()
        tenant_id = created["tenant"]["id"]
        lease_id = created["lease_id"]

        # Both signatures make the lease active (landlord signs for an independent tenant)
        client.post(f"/api/leases/{lease_id}/sign", headers=user_a_headers, json={"role": "landlord"})
        client.post(f"/api/leases/{lease_id}/sign", headers=user_a_headers, json={"role": "tenant"})

        response = client.post(
            f"/api/tenants/{tenant_id}/end",
            headers=user_a_headers,
            json={
                "move_out_date": "2026-12-31",
                "move_out_condition_notes": "Wall paint scuffed",
                "move_out_photos": ["https://cdn.example.com/out-1.jpg"],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ended"
        assert data["move_out_date"] == "2026-12-31"
        assert data["move_out_photos"] == ["https://cdn.example.com/out-1.jpg"]

        lease = client.get(f"/api/leases/{lease_id}", headers=user_a_headers).json()
        assert lease["status"] == "terminated"
        assert db_session.query(RentPayment).filter(RentPayment.tenant_id == tenant_id).count() == 12

    def test_end_tenancy_twice_rejected(self, client, user_a_headers, approved_property):
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()
        tenant_id = created["tenant"]["id"]
        body = {"move_out_date": "2026-12-31"}

        client.post(f"/api/tenants/{tenant_id}/end", headers=user_a_headers, json=body)
        response = client.post(f"/api/tenants/{tenant_id}/end", headers=user_a_headers, json=body)
        assert response.status_code == 409

    def test_end_tenancy_leaves_draft_lease(self, client, user_a_headers, approved_property):
        """Only active leases are terminated"""
        created = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()

        client.post(
            f"/api/tenants/{created['tenant']['id']}/end",
            headers=user_a_headers,
            json={"move_out_date": "2026-06-30"},
        )
        lease = client.get(f"/api/leases/{created['lease_id']}", headers=user_a_headers).json()
        assert lease["status"] == "draft"


class TestTenantStats:
    def test_empty_stats(self, client, user_a_headers):
        """No payment rows means a 100% on-time rate"""
        response = client.get("/api/tenants/stats", headers=user_a_headers)
        assert response.json() == {
            "total_tenants": 0,
            "active_tenants": 0,
            "total_monthly_rent": 0,
            "on_time_payment_rate": 100.0,
            "late_payments_count": 0,
        }

    def test_stats(self, client, user_a_headers, approved_property, db_session):
        first = client.post(
            "/api/tenants", headers=user_a_headers, json=tenant_payload(approved_property.id)
        ).json()
        second = client.post(
            "/api/tenants",
            headers=user_a_headers,
            json=tenant_payload(approved_property.id, tenant_name="Baraka", monthly_rent=250000),
        ).json()
        client.post(
            f"/api/tenants/{second['tenant']['id']}/end",
            headers=user_a_headers,
            json={"move_out_date": "2026-03-31"},
        )

        # One fully paid month out of 24 rows
        client.post(
            "/api/rent-payments/record",
            headers=user_a_headers,
            json={
                "tenant_id": first["tenant"]["id"],
                "payment_month": "2026-01-01",
                "amount_paid": 400000,
            },
        )

        stats = client.get("/api/tenants/stats", headers=user_a_headers).json()
        assert stats["total_tenants"] == 2
        assert stats["active_tenants"] == 1
        assert stats["total_monthly_rent"] == 400000
        assert stats["on_time_payment_rate"] == round(100 / 24, 1)
        assert stats["late_payments_count"] == 0
