import logging

from sqlalchemy.orm import Session

from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user_schemas import UserProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Profile management for the authenticated user"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        """Update name, email or phone; the phone feeds booking contact links"""
        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(user, field, value)

        user = self.user_repo.update(user)
        logger.info("User %s updated profile fields %s", user.id, sorted(update_data))
        return user
