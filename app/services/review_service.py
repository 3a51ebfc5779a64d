import logging

from sqlalchemy.orm import Session

from app.models.actor_context import ActorContext
from app.models.review import Review
from app.repositories.review_repository import ReviewRepository
from app.schemas.review_schemas import ReviewCreate
from app.services.booking_service import BookingService
from app.core.exceptions import ValidationException

logger = logging.getLogger(__name__)


class ReviewService:
    """Service layer for guest reviews"""

    def __init__(self, db: Session):
        self.db = db
        self.review_repo = ReviewRepository(db)
        self.booking_service = BookingService(db)

    def create_review(self, data: ReviewCreate, context: ActorContext) -> Review:
        """
        Review a completed stay.

        Raises:
            NotFoundException: Booking not visible to the caller
            ValidationException: Booking not reviewable by the caller
        """
        booking = self.booking_service.get_booking(data.booking_id, context)
        if not self.booking_service.can_review(booking, context):
            raise ValidationException(
                "Only the guest of a completed booking can review it, once"
            )

        review = self.review_repo.create(
            Review(
                booking_id=booking.id,
                property_id=booking.property_id,
                user_id=context.user_id,
                rating=data.rating,
                comment=data.comment,
            )
        )
        logger.info("User %s reviewed booking %s (%d/5)", context.user_id, booking.id, data.rating)
        return review

    def list_property_reviews(self, property_id: int) -> dict:
        reviews = self.review_repo.get_by_property(property_id)
        average = round(sum(r.rating for r in reviews) / len(reviews), 2) if reviews else None
        return {"reviews": reviews, "total": len(reviews), "average_rating": average}
