"""Actor context for request authorization."""

from dataclasses import dataclass
from app.models.user import User
from app.models.role import UserRole


@dataclass
class ActorContext:
    """
    The authenticated actor of a single request.

    Resolved from the JWT and the users table by the `get_actor_context`
    dependency and passed explicitly into every service call, so no
    module holds session state between requests.

    Attributes:
        user: The authenticated User object
        role: The user's platform role
    """

    user: User
    role: UserRole

    @property
    def user_id(self) -> int:
        return self.user.id

    def is_admin(self) -> bool:
        """Check if the actor is a platform administrator."""
        return self.role == UserRole.ADMIN

    def owns(self, owner_id: int | None) -> bool:
        """Check if a row's owner column (host_id, landlord_id, guest_id) is this actor."""
        return owner_id is not None and owner_id == self.user.id

    def __repr__(self) -> str:
        return f"<ActorContext(user_id={self.user.id}, role={self.role.value})>"
