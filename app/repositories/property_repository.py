from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from app.models.property import Property, PropertyStatus


class PropertyRepository:
    """Repository for Property model operations"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, property_: Property) -> Property:
        self.db.add(property_)
        self.db.commit()
        self.db.refresh(property_)
        return property_

    def get_by_id(self, property_id: int) -> Optional[Property]:
        return self.db.query(Property).filter(Property.id == property_id).first()

    def get_by_id_and_host(self, property_id: int, host_id: int) -> Optional[Property]:
        """
        Get property ensuring it belongs to the host.

        Returns None if property doesn't exist or belongs to another host.
        """
        return (
            self.db.query(Property)
            .filter(Property.id == property_id, Property.host_id == host_id)
            .first()
        )

    def get_by_host(self, host_id: int, status: Optional[PropertyStatus] = None) -> list[Property]:
        query = self.db.query(Property).filter(Property.host_id == host_id)
        if status is not None:
            query = query.filter(Property.status == status)
        return query.order_by(Property.created_at.desc(), Property.id.desc()).all()

    def get_with_filters(
        self,
        status: Optional[PropertyStatus] = None,
        search: Optional[str] = None,
        max_price: Optional[float] = None,
        available_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Property], int]:
        """
        Get properties with filters.

        Args:
            status: Optional moderation status filter
            search: Case-insensitive partial match on title or location
            max_price: Upper bound on monthly rent
            available_only: Only listings flagged as available
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            Tuple of (properties list, total count)
        """
        query = self.db.query(Property)

        if status is not None:
            query = query.filter(Property.status == status)

        if search:
            query = query.filter(
                or_(Property.title.ilike(f"%{search}%"), Property.location.ilike(f"%{search}%"))
            )

        if max_price is not None:
            query = query.filter(Property.price <= max_price)

        if available_only:
            query = query.filter(Property.is_available.is_(True))

        total = query.count()
        properties = (
            query.order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return properties, total

    def count_by_status(self) -> dict[PropertyStatus, int]:
        rows = (
            self.db.query(Property.status, func.count(Property.id))
            .group_by(Property.status)
            .all()
        )
        counts = {status: 0 for status in PropertyStatus}
        for status, n in rows:
            counts[status] = n
        return counts

    def update(self, property_: Property) -> Property:
        self.db.commit()
        self.db.refresh(property_)
        return property_
