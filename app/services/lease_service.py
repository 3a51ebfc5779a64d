import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.actor_context import ActorContext
from app.models.lease import (
    EDITABLE_LEASE_STATUSES,
    LeaseAgreement,
    LeaseStatus,
    SignatoryRole,
    TERMINAL_LEASE_STATUSES,
)
from app.repositories.lease_repository import LeaseRepository
from app.repositories.tenant_repository import TenantRepository
from app.schemas.lease_schemas import LeaseCreate, LeaseUpdate
from app.core.exceptions import (
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class LeaseService:
    """Service layer for lease agreement business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.lease_repo = LeaseRepository(db)
        self.tenant_repo = TenantRepository(db)

    def _get_landlord_lease(self, lease_id: int, context: ActorContext) -> LeaseAgreement:
        lease = self.lease_repo.get_by_id_and_landlord(lease_id, context.user_id)
        if not lease:
            raise NotFoundException(f"Lease {lease_id} not found")
        return lease

    def _can_view(self, lease: LeaseAgreement, context: ActorContext) -> bool:
        if context.owns(lease.landlord_id):
            return True
        return context.owns(lease.tenant.user_id)

    def create_lease(self, data: LeaseCreate, context: ActorContext) -> LeaseAgreement:
        """
        Create a standalone draft lease for one of the landlord's tenants.

        Raises:
            NotFoundException: Tenant not found for this landlord
        """
        tenant = self.tenant_repo.get_by_id_and_landlord(data.tenant_id, context.user_id)
        if not tenant:
            raise NotFoundException(f"Tenant {data.tenant_id} not found")

        values = data.model_dump(exclude={"tenant_id"})
        if values["rent_due_day"] is None:
            values["rent_due_day"] = settings.DEFAULT_RENT_DUE_DAY
        if values["late_fee_grace_period"] is None:
            values["late_fee_grace_period"] = settings.DEFAULT_LATE_FEE_GRACE_PERIOD

        lease = LeaseAgreement(
            tenant_id=tenant.id,
            property_id=tenant.property_id,
            landlord_id=context.user_id,
            status=LeaseStatus.DRAFT,
            **values,
        )
        lease = self.lease_repo.create(lease)
        logger.info("Created draft lease %s for tenant %s", lease.id, tenant.id)
        return lease

    def get_lease(self, lease_id: int, context: ActorContext) -> LeaseAgreement:
        """Get a lease visible to the caller (its landlord or its linked tenant)"""
        lease = self.lease_repo.get_by_id(lease_id)
        if not lease or not self._can_view(lease, context):
            raise NotFoundException(f"Lease {lease_id} not found")
        return lease

    def list_leases(
        self,
        context: ActorContext,
        status: Optional[LeaseStatus] = None,
        property_id: Optional[int] = None,
    ) -> list[LeaseAgreement]:
        return self.lease_repo.get_by_landlord(
            landlord_id=context.user_id, status=status, property_id=property_id
        )

    def update_lease(
        self, lease_id: int, data: LeaseUpdate, context: ActorContext
    ) -> LeaseAgreement:
        """
        Update lease terms while the lease is DRAFT or PENDING_SIGNATURE.

        Raises:
            InvalidTransitionException: Lease is active or finished
            ValidationException: Resulting end date not after start date
        """
        lease = self._get_landlord_lease(lease_id, context)
        if lease.status not in EDITABLE_LEASE_STATUSES:
            raise InvalidTransitionException(
                f"Lease {lease.id} is {lease.status.value} and can no longer be edited"
            )

        update_data = data.model_dump(exclude_unset=True)
        start = update_data.get("start_date", lease.start_date)
        end = update_data.get("end_date", lease.end_date)
        if end <= start:
            raise ValidationException("end_date must be after start_date")

        for field, value in update_data.items():
            setattr(lease, field, value)

        lease = self.lease_repo.update(lease)
        logger.info("Updated lease %s fields %s", lease.id, sorted(update_data))
        return lease

    def sign_lease(
        self, lease_id: int, role: SignatoryRole, context: ActorContext
    ) -> LeaseAgreement:
        """
        Record a party's signature and recompute the lease status.

        The landlord signs as LANDLORD. The TENANT signature comes from the
        linked tenant user; for an independent tenant the landlord records it.

        Raises:
            NotFoundException: Lease not visible to the caller
            ForbiddenException: Caller may not sign for this role
            InvalidTransitionException: Lease is finished or already signed by that party
        """
        lease = self.get_lease(lease_id, context)

        if lease.status in TERMINAL_LEASE_STATUSES:
            raise InvalidTransitionException(
                f"Lease {lease.id} is {lease.status.value} and cannot be signed"
            )

        tenant_user_id = lease.tenant.user_id
        now = datetime.now(timezone.utc)

        if role == SignatoryRole.LANDLORD:
            if not context.owns(lease.landlord_id):
                raise ForbiddenException("Only the landlord can sign as landlord")
            if lease.landlord_signed:
                raise InvalidTransitionException("Landlord has already signed this lease")
            lease.landlord_signed = True
            lease.landlord_signature_date = now
        else:
            signer_id = tenant_user_id if tenant_user_id is not None else lease.landlord_id
            if not context.owns(signer_id):
                raise ForbiddenException("Only the tenant can sign as tenant")
            if lease.tenant_signed:
                raise InvalidTransitionException("Tenant has already signed this lease")
            lease.tenant_signed = True
            lease.tenant_signature_date = now

        previous = lease.status
        lease.status = lease.signature_status()
        lease = self.lease_repo.update(lease)

        logger.info(
            "Lease %s signed by %s: %s -> %s",
            lease.id,
            role.value,
            previous.value,
            lease.status.value,
        )
        return lease

    def terminate_lease(self, lease_id: int, context: ActorContext) -> LeaseAgreement:
        lease = self._get_landlord_lease(lease_id, context)
        if lease.is_terminal:
            raise InvalidTransitionException(f"Lease {lease.id} is already {lease.status.value}")

        previous = lease.status
        lease.status = LeaseStatus.TERMINATED
        lease = self.lease_repo.update(lease)
        logger.info("Lease %s terminated (was %s)", lease.id, previous.value)
        return lease

    def expire_leases(self, context: ActorContext, today: Optional[date] = None) -> int:
        """Move the landlord's ACTIVE leases past their end date to EXPIRED"""
        today = today or date.today()
        expired = self.lease_repo.expire_ended(today, landlord_id=context.user_id)
        logger.info("Expired %d lease(s) for landlord %s", expired, context.user_id)
        return expired

    def get_lease_stats(self, context: ActorContext, today: Optional[date] = None) -> dict:
        today = today or date.today()
        horizon = today + timedelta(days=settings.LEASE_EXPIRY_WARNING_DAYS)
        leases = self.lease_repo.get_by_landlord(landlord_id=context.user_id)

        def count(status: LeaseStatus) -> int:
            return sum(1 for lease in leases if lease.status == status)

        expiring_soon = sum(
            1
            for lease in leases
            if lease.status == LeaseStatus.ACTIVE and today < lease.end_date <= horizon
        )

        return {
            "total": len(leases),
            "active": count(LeaseStatus.ACTIVE),
            "draft": count(LeaseStatus.DRAFT),
            "pending_signature": count(LeaseStatus.PENDING_SIGNATURE),
            "expiring_soon": expiring_soon,
            "expired": count(LeaseStatus.EXPIRED) + count(LeaseStatus.TERMINATED),
        }
