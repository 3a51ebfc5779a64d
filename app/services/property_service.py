import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.actor_context import ActorContext
from app.models.property import Property, PropertyStatus
from app.repositories.property_repository import PropertyRepository
from app.schemas.property_schemas import PropertyCreate, PropertyUpdate
from app.core.exceptions import NotFoundException

logger = logging.getLogger(__name__)


class PropertyService:
    """Service layer for host listings and the public catalogue"""

    def __init__(self, db: Session):
        self.db = db
        self.property_repo = PropertyRepository(db)

    def create_property(self, data: PropertyCreate, context: ActorContext) -> Property:
        """
        Submit a listing. It stays PENDING until an administrator reviews it.

        Args:
            data: Listing details
            context: Actor context (the host)

        Returns:
            Created Property
        """
        property_ = Property(
            host_id=context.user_id,
            status=PropertyStatus.PENDING,
            **data.model_dump(),
        )
        property_ = self.property_repo.create(property_)
        logger.info("Host %s submitted property %s for review", context.user_id, property_.id)
        return property_

    def list_host_properties(
        self, context: ActorContext, status: Optional[PropertyStatus] = None
    ) -> list[Property]:
        return self.property_repo.get_by_host(context.user_id, status=status)

    def update_property(
        self, property_id: int, data: PropertyUpdate, context: ActorContext
    ) -> Property:
        """
        Update one of the host's listings.

        Moderation fields are not writable here; an edited listing keeps
        its current moderation status.
        """
        property_ = self.property_repo.get_by_id_and_host(property_id, context.user_id)
        if not property_:
            raise NotFoundException(f"Property {property_id} not found")

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(property_, field, value)

        property_ = self.property_repo.update(property_)
        logger.info("Host %s updated property %s", context.user_id, property_.id)
        return property_

    def get_property(self, property_id: int, context: Optional[ActorContext] = None) -> Property:
        """
        Get a listing.

        Approved listings are public. Others are visible only to their host
        and to administrators.
        """
        property_ = self.property_repo.get_by_id(property_id)
        if not property_:
            raise NotFoundException(f"Property {property_id} not found")

        if property_.status != PropertyStatus.APPROVED:
            if context is None or not (context.is_admin() or context.owns(property_.host_id)):
                raise NotFoundException(f"Property {property_id} not found")
        return property_

    def browse(
        self,
        search: Optional[str] = None,
        max_price: Optional[float] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Property], int]:
        """Public catalogue: approved, available listings"""
        return self.property_repo.get_with_filters(
            status=PropertyStatus.APPROVED,
            search=search,
            max_price=max_price,
            available_only=True,
            limit=limit,
            offset=offset,
        )
