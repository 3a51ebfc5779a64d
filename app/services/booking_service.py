import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.actor_context import ActorContext
from app.models.booking import Booking, BookingStatus, CANCELLABLE_BOOKING_STATUSES
from app.models.property import Property, PropertyStatus
from app.repositories.booking_repository import BookingRepository
from app.repositories.property_repository import PropertyRepository
from app.repositories.review_repository import ReviewRepository
from app.schemas.booking_schemas import BookingCreate, BookingQuoteRequest
from app.services import contact_links
from app.services.booking_pricing import BookingQuote, compute_booking
from app.services.platform_settings_service import PlatformSettingsService
from app.core.exceptions import (
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Client totals within one cent of the server total are accepted
TOTAL_TOLERANCE = 0.01


class BookingService:
    """Service layer for guest bookings against approved listings"""

    def __init__(self, db: Session):
        self.db = db
        self.booking_repo = BookingRepository(db)
        self.property_repo = PropertyRepository(db)
        self.review_repo = ReviewRepository(db)
        self.settings_service = PlatformSettingsService(db)

    def _get_bookable_property(self, property_id: int) -> Property:
        property_ = self.property_repo.get_by_id(property_id)
        if not property_ or property_.status != PropertyStatus.APPROVED:
            raise NotFoundException(f"Property {property_id} not found")
        return property_

    def quote(self, data: BookingQuoteRequest) -> dict:
        """Price a stay with the current commission rate"""
        property_ = self._get_bookable_property(data.property_id)
        result = self._price(property_, data.check_in, data.check_out)
        return {
            "months": result.months,
            "monthly_rent": result.monthly_rent,
            "subtotal": result.subtotal,
            "commission_rate": result.commission_rate,
            "service_fee": result.service_fee,
            "total_amount": result.total_amount,
            "currency": settings.CURRENCY,
        }

    def _price(self, property_: Property, check_in: date, check_out: date) -> BookingQuote:
        return compute_booking(
            monthly_rent=float(property_.price),
            check_in=check_in,
            check_out=check_out,
            commission_rate=self.settings_service.get_commission_rate(),
        )

    def create_booking(self, data: BookingCreate, context: ActorContext) -> Booking:
        """
        Create a pending booking priced by the server.

        Raises:
            NotFoundException: Property not found or not approved
            ValidationException: Property unavailable, own listing, or
                client total does not match the server's price
        """
        property_ = self._get_bookable_property(data.property_id)
        if not property_.is_available:
            raise ValidationException(f"Property {property_.id} is not available for booking")
        if context.owns(property_.host_id):
            raise ValidationException("Hosts cannot book their own property")

        price = self._price(property_, data.check_in, data.check_out)
        if (
            data.total_amount is not None
            and abs(data.total_amount - price.total_amount) > TOTAL_TOLERANCE
        ):
            logger.warning(
                "Rejected booking for property %s: client total %.2f, server total %.2f",
                property_.id,
                data.total_amount,
                price.total_amount,
            )
            raise ValidationException(
                f"Total amount mismatch: expected {price.total_amount:.2f} {settings.CURRENCY}"
            )

        booking = Booking(
            property_id=property_.id,
            guest_id=context.user_id,
            host_id=property_.host_id,
            check_in=data.check_in,
            check_out=data.check_out,
            total_months=price.months,
            monthly_rent=price.monthly_rent,
            commission_rate=price.commission_rate,
            subtotal=price.subtotal,
            service_fee=price.service_fee,
            total_amount=price.total_amount,
            status=BookingStatus.PENDING,
            special_requests=data.special_requests,
        )
        booking = self.booking_repo.create(booking)
        logger.info(
            "Guest %s booked property %s for %d month(s), booking %s",
            context.user_id,
            property_.id,
            price.months,
            booking.id,
        )
        return booking

    def get_booking(self, booking_id: int, context: ActorContext) -> Booking:
        """Get a booking the caller takes part in (as guest or host)"""
        booking = self.booking_repo.get_by_id(booking_id)
        if not booking or not (
            context.owns(booking.guest_id) or context.owns(booking.host_id) or context.is_admin()
        ):
            raise NotFoundException(f"Booking {booking_id} not found")
        return booking

    def list_bookings(
        self,
        context: ActorContext,
        as_host: bool = False,
        status: Optional[BookingStatus] = None,
        property_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Booking], int]:
        """Guest view by default, host view with as_host"""
        return self.booking_repo.get_with_filters(
            guest_id=None if as_host else context.user_id,
            host_id=context.user_id if as_host else None,
            status=status,
            property_id=property_id,
            from_date=from_date,
            to_date=to_date,
            limit=limit,
            offset=offset,
        )

    def _host_transition(
        self,
        booking_id: int,
        context: ActorContext,
        from_status: BookingStatus,
        to_status: BookingStatus,
    ) -> Booking:
        booking = self.get_booking(booking_id, context)
        if not context.owns(booking.host_id):
            raise ForbiddenException("Only the host can change this booking")
        if booking.status != from_status:
            raise InvalidTransitionException(
                f"Booking {booking.id} is {booking.status.value}, expected {from_status.value}"
            )

        booking.status = to_status
        booking = self.booking_repo.update(booking)
        logger.info(
            "Booking %s: %s -> %s by host %s",
            booking.id,
            from_status.value,
            to_status.value,
            context.user_id,
        )
        return booking

    def confirm_booking(self, booking_id: int, context: ActorContext) -> Booking:
        return self._host_transition(
            booking_id, context, BookingStatus.PENDING, BookingStatus.CONFIRMED
        )

    def complete_booking(self, booking_id: int, context: ActorContext) -> Booking:
        return self._host_transition(
            booking_id, context, BookingStatus.CONFIRMED, BookingStatus.COMPLETED
        )

    def cancel_booking(
        self,
        booking_id: int,
        reason: Optional[str],
        context: ActorContext,
        today: Optional[date] = None,
    ) -> Booking:
        """
        Cancel a pending or confirmed booking.

        Either party may cancel, as long as check-in is more than
        CANCELLATION_NOTICE_DAYS away.

        Raises:
            ForbiddenException: Caller is neither guest nor host
            InvalidTransitionException: Booking already completed or cancelled
            ValidationException: Too close to check-in
        """
        today = today or date.today()
        booking = self.get_booking(booking_id, context)
        if not (context.owns(booking.guest_id) or context.owns(booking.host_id)):
            raise ForbiddenException("Only the guest or the host can cancel this booking")

        if booking.status not in CANCELLABLE_BOOKING_STATUSES:
            raise InvalidTransitionException(
                f"Booking {booking.id} is {booking.status.value} and cannot be cancelled"
            )

        days_left = booking.days_until_check_in(today)
        if days_left <= settings.CANCELLATION_NOTICE_DAYS:
            raise ValidationException(
                f"Bookings can only be cancelled more than {settings.CANCELLATION_NOTICE_DAYS} "
                f"days before check-in ({days_left} left)"
            )

        previous = booking.status
        booking.status = BookingStatus.CANCELLED
        booking.cancellation_reason = reason
        booking.cancellation_date = datetime.now(timezone.utc)
        booking.cancelled_by = context.user_id
        booking = self.booking_repo.update(booking)

        logger.info(
            "Booking %s cancelled by user %s (was %s, %d days before check-in)",
            booking.id,
            context.user_id,
            previous.value,
            days_left,
        )
        return booking

    def get_contact_links(self, booking_id: int, context: ActorContext) -> dict:
        """
        Contact links for the other party of a booking.

        The guest gets the host's links and the host gets the guest's.
        """
        booking = self.get_booking(booking_id, context)
        if context.owns(booking.guest_id):
            counterpart = booking.host
            message = f"Hello, I have a booking for {booking.listing.title} (#{booking.id})."
        elif context.owns(booking.host_id):
            counterpart = booking.guest
            message = f"Hello, about your booking for {booking.listing.title} (#{booking.id})."
        else:
            raise ForbiddenException("Only booking participants can see contact details")

        return {
            "name": counterpart.full_name,
            "phone_link": contact_links.phone_link(counterpart.phone),
            "email_link": contact_links.email_link(counterpart.email),
            "whatsapp_link": contact_links.whatsapp_link(counterpart.phone, message),
        }

    def can_review(self, booking: Booking, context: ActorContext) -> bool:
        """Completed booking, caller is the guest, and no review yet"""
        return (
            booking.status == BookingStatus.COMPLETED
            and context.owns(booking.guest_id)
            and self.review_repo.get_for_booking_and_user(booking.id, context.user_id) is None
        )

    def get_review_eligibility(self, booking_id: int, context: ActorContext) -> dict:
        booking = self.get_booking(booking_id, context)
        return {"booking_id": booking.id, "can_review": self.can_review(booking, context)}
