from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.user_schemas import UserProfileResponse, UserProfileUpdate

router = APIRouter()


@router.get("/me", response_model=UserProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return user


@router.patch("/me", response_model=UserProfileResponse)
def update_profile(
    data: UserProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update your name, email or phone (used for booking contact links)"""
    service = UserService(db)
    return service.update_profile(user, data)
