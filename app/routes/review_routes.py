from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.services.review_service import ReviewService
from app.schemas.review_schemas import ReviewCreate, ReviewResponse

router = APIRouter()


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Review a completed stay.

    - Only the guest, only once per booking
    """
    service = ReviewService(db)
    return service.create_review(data, context)
