class RentalMarketplaceException(Exception):
    """Base exception for the rental marketplace"""

    pass


class UnauthorizedException(RentalMarketplaceException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(RentalMarketplaceException):
    """Raised when resource not found"""

    pass


class ForbiddenException(RentalMarketplaceException):
    """Raised when user tries to act on another user's data"""

    pass


class ValidationException(RentalMarketplaceException):
    """Raised for business logic validation errors"""

    pass


class InvalidTransitionException(RentalMarketplaceException):
    """Raised when a status change is not allowed from the current status"""

    pass
