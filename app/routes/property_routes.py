from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.models.property import PropertyStatus
from app.services.property_service import PropertyService
from app.services.review_service import ReviewService
from app.schemas.property_schemas import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
)
from app.schemas.review_schemas import ReviewListResponse

router = APIRouter()


@router.get("", response_model=PropertyListResponse)
def browse_properties(
    search: Optional[str] = Query(None, description="Match on title or location"),
    max_price: Optional[float] = Query(None, gt=0, description="Maximum monthly rent"),
    limit: int = Query(50, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    db: Session = Depends(get_db),
):
    """
    Public catalogue of approved, available listings.

    - No authentication required
    """
    service = PropertyService(db)
    properties, total = service.browse(
        search=search, max_price=max_price, limit=limit, offset=offset
    )
    return PropertyListResponse(properties=properties, total=total)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    data: PropertyCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Submit a listing; it is hidden from the catalogue until approved"""
    service = PropertyService(db)
    return service.create_property(data, context)


@router.get("/mine", response_model=PropertyListResponse)
def list_my_properties(
    status_filter: Optional[PropertyStatus] = Query(
        None, alias="status", description="Filter by moderation status"
    ),
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Your listings in every moderation status"""
    service = PropertyService(db)
    properties = service.list_host_properties(context, status=status_filter)
    return PropertyListResponse(properties=properties, total=len(properties))


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: int, db: Session = Depends(get_db)):
    """Get an approved listing"""
    service = PropertyService(db)
    return service.get_property(property_id)


@router.patch("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    data: PropertyUpdate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Update one of your listings.

    - Only provided fields are updated (partial update)
    - Returns 404 if the listing is not yours
    """
    service = PropertyService(db)
    return service.update_property(property_id, data, context)


@router.get("/{property_id}/reviews", response_model=ReviewListResponse)
def list_property_reviews(property_id: int, db: Session = Depends(get_db)):
    """Reviews of a listing with the average rating"""
    service = PropertyService(db)
    listing = service.get_property(property_id)
    return ReviewService(db).list_property_reviews(listing.id)
