import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.actor_context import ActorContext
from app.models.lease import LeaseAgreement, LeaseStatus
from app.models.property import PropertyStatus
from app.models.rent_payment import RentPaymentStatus
from app.models.tenant import Tenant, TenantStatus
from app.repositories.lease_repository import LeaseRepository
from app.repositories.property_repository import PropertyRepository
from app.repositories.rent_payment_repository import RentPaymentRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.schemas.tenant_schemas import EndTenancyRequest, TenantCreate, TenantUpdate
from app.services.rent_payment_service import RentPaymentService
from app.core.exceptions import (
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

OVERDUE_FILTER = "overdue"


def tenant_to_dict(tenant: Tenant, is_late_on_rent: bool) -> dict:
    """Flatten a tenant into the TenantResponse shape"""
    return {
        "id": tenant.id,
        "property_id": tenant.property_id,
        "landlord_id": tenant.landlord_id,
        "identity": asdict(tenant.identity),
        "emergency_contact_name": tenant.emergency_contact_name,
        "emergency_contact_phone": tenant.emergency_contact_phone,
        "emergency_contact_relationship": tenant.emergency_contact_relationship,
        "lease_start_date": tenant.lease_start_date,
        "lease_end_date": tenant.lease_end_date,
        "monthly_rent": float(tenant.monthly_rent),
        "security_deposit": float(tenant.security_deposit or 0),
        "status": tenant.status,
        "is_late_on_rent": is_late_on_rent,
        "move_in_date": tenant.move_in_date,
        "move_out_date": tenant.move_out_date,
        "move_in_condition_notes": tenant.move_in_condition_notes,
        "move_out_condition_notes": tenant.move_out_condition_notes,
        "move_in_photos": list(tenant.move_in_photos or []),
        "move_out_photos": list(tenant.move_out_photos or []),
        "created_at": tenant.created_at,
        "updated_at": tenant.updated_at,
    }


class TenancyService:
    """Service layer for the landlord-side tenancy lifecycle"""

    def __init__(self, db: Session):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.lease_repo = LeaseRepository(db)
        self.payment_repo = RentPaymentRepository(db)
        self.property_repo = PropertyRepository(db)
        self.user_repo = UserRepository(db)
        self.payment_service = RentPaymentService(db)

    def create_tenant(self, data: TenantCreate, context: ActorContext) -> dict:
        """
        Create a tenant, its draft lease and its rent schedule.

        The tenant and lease are committed together. The schedule is
        generated afterwards on a best-effort basis: if it fails the
        tenant and lease stay and `payment_schedule_created` is False, and
        the landlord can retry through `regenerate_payment_schedule`.

        Args:
            data: Tenant, lease and rent details
            context: Actor context (the landlord)

        Returns:
            Dict matching TenantCreateResponse

        Raises:
            NotFoundException: Property not found or not hosted by the caller
            ValidationException: Property not approved, or linked user missing
        """
        property_ = self.property_repo.get_by_id_and_host(data.property_id, context.user_id)
        if not property_:
            raise NotFoundException(f"Property {data.property_id} not found")
        if property_.status != PropertyStatus.APPROVED:
            raise ValidationException("Tenants can only be added to approved properties")

        if data.user_id is not None and not self.user_repo.get_by_id(data.user_id):
            raise ValidationException(f"User {data.user_id} does not exist")

        rent_due_day = data.rent_due_day or settings.DEFAULT_RENT_DUE_DAY
        grace_period = (
            data.late_fee_grace_period
            if data.late_fee_grace_period is not None
            else settings.DEFAULT_LATE_FEE_GRACE_PERIOD
        )

        try:
            tenant = self.tenant_repo.create_no_commit(
                Tenant(
                    property_id=property_.id,
                    landlord_id=context.user_id,
                    user_id=data.user_id,
                    tenant_name=data.tenant_name,
                    tenant_phone=data.tenant_phone,
                    tenant_email=data.tenant_email,
                    emergency_contact_name=data.emergency_contact_name,
                    emergency_contact_phone=data.emergency_contact_phone,
                    emergency_contact_relationship=data.emergency_contact_relationship,
                    lease_start_date=data.lease_start_date,
                    lease_end_date=data.lease_end_date,
                    monthly_rent=data.monthly_rent,
                    security_deposit=data.security_deposit,
                    status=TenantStatus.ACTIVE,
                    move_in_date=data.move_in_date,
                    move_in_condition_notes=data.move_in_condition_notes,
                    move_in_photos=list(data.move_in_photos),
                    move_out_photos=[],
                )
            )
            lease = self.lease_repo.create_no_commit(
                LeaseAgreement(
                    tenant_id=tenant.id,
                    property_id=property_.id,
                    landlord_id=context.user_id,
                    start_date=data.lease_start_date,
                    end_date=data.lease_end_date,
                    monthly_rent=data.monthly_rent,
                    security_deposit=data.security_deposit,
                    utilities_included=[],
                    rent_due_day=rent_due_day,
                    late_fee_amount=data.late_fee_amount,
                    late_fee_grace_period=grace_period,
                    status=LeaseStatus.DRAFT,
                )
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(
                "Failed to create tenant for property %s", property_.id, exc_info=True
            )
            raise

        self.db.refresh(tenant)
        logger.info(
            "Landlord %s created tenant %s with draft lease %s on property %s",
            context.user_id,
            tenant.id,
            lease.id,
            property_.id,
        )

        payments_created = 0
        schedule_created = True
        try:
            payments_created = self.payment_service.create_payment_schedule(tenant, rent_due_day)
        except SQLAlchemyError:
            self.db.rollback()
            schedule_created = False
            logger.warning(
                "Payment schedule generation failed for tenant %s; it can be regenerated manually",
                tenant.id,
                exc_info=True,
            )

        self.db.refresh(tenant)
        return {
            "tenant": tenant_to_dict(tenant, is_late_on_rent=False),
            "lease_id": lease.id,
            "payment_schedule_created": schedule_created,
            "payments_created": payments_created,
        }

    def regenerate_payment_schedule(self, tenant_id: int, context: ActorContext) -> dict:
        """Create the rent rows missing for a tenant, using the latest lease's due day"""
        tenant = self._get_tenant(tenant_id, context)
        lease = self.lease_repo.get_latest_for_tenant(tenant.id)
        rent_due_day = lease.rent_due_day if lease else settings.DEFAULT_RENT_DUE_DAY

        created = self.payment_service.create_payment_schedule(tenant, rent_due_day)
        return {"tenant_id": tenant.id, "payments_created": created}

    def _get_tenant(self, tenant_id: int, context: ActorContext) -> Tenant:
        tenant = self.tenant_repo.get_by_id_and_landlord(tenant_id, context.user_id)
        if not tenant:
            raise NotFoundException(f"Tenant {tenant_id} not found")
        return tenant

    def _is_late(self, tenant: Tenant, today: date) -> bool:
        return tenant.id in self.payment_repo.get_late_tenant_ids([tenant.id], today)

    def get_tenant(
        self, tenant_id: int, context: ActorContext, today: Optional[date] = None
    ) -> dict:
        tenant = self._get_tenant(tenant_id, context)
        return tenant_to_dict(tenant, self._is_late(tenant, today or date.today()))

    def list_tenants(
        self,
        context: ActorContext,
        status: Optional[TenantStatus] = None,
        property_id: Optional[int] = None,
        payment_status: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[dict]:
        """
        List the landlord's tenants with the derived late-rent flag.

        Args:
            context: Actor context (the landlord)
            status: Optional tenant status filter
            property_id: Optional property filter
            payment_status: "overdue" keeps only tenants late on rent
            today: Reference date for lateness (defaults to today)

        Returns:
            List of dicts matching TenantResponse
        """
        if payment_status is not None and payment_status != OVERDUE_FILTER:
            raise ValidationException(f"Unsupported payment_status filter: {payment_status}")

        today = today or date.today()
        tenants = self.tenant_repo.get_by_landlord(
            landlord_id=context.user_id, status=status, property_id=property_id
        )
        late_ids = self.payment_repo.get_late_tenant_ids([t.id for t in tenants], today)

        if payment_status == OVERDUE_FILTER:
            tenants = [t for t in tenants if t.id in late_ids]

        return [tenant_to_dict(t, t.id in late_ids) for t in tenants]

    def update_tenant(
        self, tenant_id: int, data: TenantUpdate, context: ActorContext
    ) -> dict:
        tenant = self._get_tenant(tenant_id, context)

        update_data = data.model_dump(exclude_unset=True)
        if tenant.user_id is not None:
            # Contact details of a linked tenant live on the user account
            for field in ("tenant_name", "tenant_phone", "tenant_email"):
                if update_data.pop(field, None) is not None:
                    raise ValidationException(
                        "Contact details of a linked tenant come from their account"
                    )
        elif "tenant_name" in update_data:
            name = (update_data["tenant_name"] or "").strip()
            if not name:
                raise ValidationException("An independent tenant needs a name")
            update_data["tenant_name"] = name

        for field, value in update_data.items():
            setattr(tenant, field, value)

        tenant = self.tenant_repo.update(tenant)
        logger.info("Updated tenant %s fields %s", tenant.id, sorted(update_data))
        return tenant_to_dict(tenant, self._is_late(tenant, date.today()))

    def end_tenancy(
        self, tenant_id: int, data: EndTenancyRequest, context: ActorContext
    ) -> dict:
        """
        End an active tenancy.

        Records the move-out details and terminates the tenant's active
        leases in the same commit. Rent payment rows are left as they are.

        Raises:
            InvalidTransitionException: Tenant already ended
        """
        tenant = self._get_tenant(tenant_id, context)
        if tenant.status != TenantStatus.ACTIVE:
            raise InvalidTransitionException(f"Tenant {tenant.id} has already ended")

        tenant.status = TenantStatus.ENDED
        tenant.move_out_date = data.move_out_date
        tenant.move_out_condition_notes = data.move_out_condition_notes
        tenant.move_out_photos = list(data.move_out_photos)
        terminated = self.lease_repo.terminate_active_for_tenant_no_commit(tenant.id)

        tenant = self.tenant_repo.update(tenant)
        logger.info(
            "Ended tenancy %s, terminated %d active lease(s)", tenant.id, terminated
        )
        return tenant_to_dict(tenant, self._is_late(tenant, date.today()))

    def get_landlord_stats(self, context: ActorContext) -> dict:
        """
        Landlord-wide tenancy statistics.

        on_time_payment_rate is the share of payment rows that are PAID and
        were never flagged late, as a percentage with one decimal. It is
        100.0 when there are no rows.
        """
        tenants = self.tenant_repo.get_by_landlord(landlord_id=context.user_id)
        active = [t for t in tenants if t.status == TenantStatus.ACTIVE]
        payments = self.payment_repo.get_with_filters(landlord_id=context.user_id)

        on_time = sum(
            1 for p in payments if p.status == RentPaymentStatus.PAID and not p.is_late
        )
        late = sum(1 for p in payments if p.status == RentPaymentStatus.LATE)
        rate = round(on_time * 100 / len(payments), 1) if payments else 100.0

        return {
            "total_tenants": len(tenants),
            "active_tenants": len(active),
            "total_monthly_rent": round(sum(float(t.monthly_rent) for t in active), 2),
            "on_time_payment_rate": rate,
            "late_payments_count": late,
        }
