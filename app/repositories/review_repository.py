from typing import Optional
from sqlalchemy.orm import Session
from app.models.review import Review


class ReviewRepository:
    """Repository for Review data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, review: Review) -> Review:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def get_for_booking_and_user(self, booking_id: int, user_id: int) -> Optional[Review]:
        return (
            self.db.query(Review)
            .filter(Review.booking_id == booking_id, Review.user_id == user_id)
            .first()
        )

    def get_by_property(self, property_id: int) -> list[Review]:
        return (
            self.db.query(Review)
            .filter(Review.property_id == property_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )
