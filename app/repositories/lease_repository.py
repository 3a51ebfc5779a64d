from datetime import date
from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.lease import LeaseAgreement, LeaseStatus


class LeaseRepository:
    """Repository for LeaseAgreement data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, lease: LeaseAgreement) -> LeaseAgreement:
        """Create a new lease"""
        self.db.add(lease)
        self.db.commit()
        self.db.refresh(lease)
        return lease

    def create_no_commit(self, lease: LeaseAgreement) -> LeaseAgreement:
        """Create single lease without committing (for atomic ops)"""
        self.db.add(lease)
        self.db.flush()
        return lease

    def get_by_id_and_landlord(self, lease_id: int, landlord_id: int) -> Optional[LeaseAgreement]:
        return (
            self.db.query(LeaseAgreement)
            .filter(LeaseAgreement.id == lease_id, LeaseAgreement.landlord_id == landlord_id)
            .first()
        )

    def get_by_id(self, lease_id: int) -> Optional[LeaseAgreement]:
        return self.db.query(LeaseAgreement).filter(LeaseAgreement.id == lease_id).first()

    def get_latest_for_tenant(self, tenant_id: int) -> Optional[LeaseAgreement]:
        """Most recent lease of a tenant; None is a valid empty state."""
        return (
            self.db.query(LeaseAgreement)
            .filter(LeaseAgreement.tenant_id == tenant_id)
            .order_by(LeaseAgreement.created_at.desc(), LeaseAgreement.id.desc())
            .first()
        )

    def get_by_landlord(
        self,
        landlord_id: int,
        status: Optional[LeaseStatus] = None,
        property_id: Optional[int] = None,
    ) -> list[LeaseAgreement]:
        query = self.db.query(LeaseAgreement).filter(LeaseAgreement.landlord_id == landlord_id)

        if status is not None:
            query = query.filter(LeaseAgreement.status == status)

        if property_id is not None:
            query = query.filter(LeaseAgreement.property_id == property_id)

        return query.order_by(LeaseAgreement.created_at.desc(), LeaseAgreement.id.desc()).all()

    def terminate_active_for_tenant_no_commit(self, tenant_id: int) -> int:
        """
        Move every ACTIVE lease of a tenant to TERMINATED without committing.

        Returns:
            Number of leases terminated
        """
        result = self.db.execute(
            update(LeaseAgreement)
            .where(
                LeaseAgreement.tenant_id == tenant_id,
                LeaseAgreement.status == LeaseStatus.ACTIVE,
            )
            .values(status=LeaseStatus.TERMINATED)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def expire_ended(self, today: date, landlord_id: Optional[int] = None) -> int:
        """
        Move ACTIVE leases whose end_date has passed to EXPIRED.

        Returns:
            Number of leases expired
        """
        stmt = update(LeaseAgreement).where(
            LeaseAgreement.status == LeaseStatus.ACTIVE,
            LeaseAgreement.end_date < today,
        )
        if landlord_id is not None:
            stmt = stmt.where(LeaseAgreement.landlord_id == landlord_id)

        result = self.db.execute(
            stmt.values(status=LeaseStatus.EXPIRED).execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return result.rowcount

    def update(self, lease: LeaseAgreement) -> LeaseAgreement:
        """Update a lease"""
        self.db.commit()
        self.db.refresh(lease)
        return lease
