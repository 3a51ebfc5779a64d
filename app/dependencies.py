from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.security import extract_user_id
from app.core.exceptions import UnauthorizedException, ForbiddenException
from app.database import get_db
from app.repositories.user_repository import UserRepository
from app.models.actor_context import ActorContext
from app.models.user import User

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to validate JWT and get/create user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Extract auth_user_id from 'sub' claim
    4. Get or auto-create User record
    5. Return User object for use in endpoints

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        token = credentials.credentials
        auth_user_id = extract_user_id(token)

        user_repo = UserRepository(db)
        user = user_repo.get_or_create_by_auth_id(auth_user_id)

        return user

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_actor_context(user: User = Depends(get_current_user)) -> ActorContext:
    """
    Resolve the actor of the request.

    Services receive this context explicitly instead of reading any
    global session state.
    """
    return ActorContext(user=user, role=user.role)


async def require_admin(context: ActorContext = Depends(get_actor_context)) -> ActorContext:
    """
    Actor context restricted to administrators.

    Raises:
        ForbiddenException: If the user is not an admin (403)
    """
    if not context.is_admin():
        raise ForbiddenException("Administrator access required")
    return context
