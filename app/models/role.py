"""User role enum for platform-level access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Platform roles.

    Every USER can act as a guest (bookings, reviews) and as a host or
    landlord (listings, tenants, leases, rent). ADMIN additionally moderates
    listings, manages users and platform settings.
    """

    USER = "user"
    ADMIN = "admin"
