from datetime import date
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.booking import Booking, BookingStatus


class BookingRepository:
    """Repository for Booking data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def get_by_id(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_with_filters(
        self,
        guest_id: Optional[int] = None,
        host_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        property_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Booking], int]:
        """
        Get bookings with filters.

        Args:
            guest_id: Restrict to bookings made by this guest
            host_id: Restrict to bookings against this host's listings
            status: Optional status filter
            property_id: Optional property filter
            from_date: Only bookings checking in on/after this date
            to_date: Only bookings checking out on/before this date
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            Tuple of (bookings list, total count)
        """
        query = self.db.query(Booking)

        if guest_id is not None:
            query = query.filter(Booking.guest_id == guest_id)

        if host_id is not None:
            query = query.filter(Booking.host_id == host_id)

        if status is not None:
            query = query.filter(Booking.status == status)

        if property_id is not None:
            query = query.filter(Booking.property_id == property_id)

        if from_date is not None:
            query = query.filter(Booking.check_in >= from_date)

        if to_date is not None:
            query = query.filter(Booking.check_out <= to_date)

        total = query.count()
        bookings = (
            query.order_by(Booking.created_at.desc(), Booking.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return bookings, total

    def count_by_status(self) -> dict[BookingStatus, int]:
        rows = self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts = {status: 0 for status in BookingStatus}
        for status, n in rows:
            counts[status] = n
        return counts

    def total_service_fees(self, statuses: frozenset[BookingStatus]) -> float:
        """Platform revenue: sum of commissions over bookings in the given statuses"""
        result = (
            self.db.query(func.sum(Booking.service_fee))
            .filter(Booking.status.in_(list(statuses)))
            .scalar()
        )
        return float(result) if result is not None else 0.0

    def update(self, booking: Booking) -> Booking:
        self.db.commit()
        self.db.refresh(booking)
        return booking
