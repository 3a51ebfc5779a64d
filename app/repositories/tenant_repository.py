"""Repository for Tenant (occupant) model operations."""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from app.models.tenant import Tenant, TenantStatus


class TenantRepository:
    """Repository for Tenant model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, tenant_id: int) -> Tenant | None:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant ID

        Returns:
            Tenant object or None if not found
        """
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_by_id_and_landlord(self, tenant_id: int, landlord_id: int) -> Tenant | None:
        """
        Get tenant ensuring it belongs to the landlord.

        Returns None if tenant doesn't exist or belongs to another landlord.
        """
        return (
            self.db.query(Tenant)
            .options(joinedload(Tenant.user))
            .filter(Tenant.id == tenant_id, Tenant.landlord_id == landlord_id)
            .first()
        )

    def get_by_landlord(
        self,
        landlord_id: int,
        status: Optional[TenantStatus] = None,
        property_id: Optional[int] = None,
        tenant_ids: Optional[set[int]] = None,
    ) -> list[Tenant]:
        """
        Get a landlord's tenants, newest first.

        Args:
            landlord_id: Landlord user ID
            status: Optional status filter
            property_id: Optional property filter
            tenant_ids: Optional restriction to this set of tenant IDs

        Returns:
            List of Tenant objects
        """
        query = (
            self.db.query(Tenant)
            .options(joinedload(Tenant.user))
            .filter(Tenant.landlord_id == landlord_id)
        )

        if status is not None:
            query = query.filter(Tenant.status == status)

        if property_id is not None:
            query = query.filter(Tenant.property_id == property_id)

        if tenant_ids is not None:
            query = query.filter(Tenant.id.in_(tenant_ids))

        return query.order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()

    def create_no_commit(self, tenant: Tenant) -> Tenant:
        """
        Create tenant without committing.
        Caller responsible for commit. Enables atomic tenant + lease creation.
        """
        self.db.add(tenant)
        self.db.flush()  # Assign ID without committing
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant.

        Args:
            tenant: Tenant object with updated fields

        Returns:
            Updated Tenant object
        """
        self.db.commit()
        self.db.refresh(tenant)
        return tenant

    def count_active(self) -> int:
        return (
            self.db.query(func.count(Tenant.id))
            .filter(Tenant.status == TenantStatus.ACTIVE)
            .scalar()
            or 0
        )
