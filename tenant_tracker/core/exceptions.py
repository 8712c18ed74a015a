class TenantTrackerException(Exception):
    """Base exception for tenant tracker"""

    pass


class UnauthorizedException(TenantTrackerException):
    """Raised when JWT validation fails or no credential is presented"""

    pass


class InvalidCredentialsException(UnauthorizedException):
    """Raised when login username/password do not match"""

    pass


class NotFoundException(TenantTrackerException):
    """Raised when resource not found"""

    pass


class ForbiddenException(TenantTrackerException):
    """Raised when the caller's role or ownership does not allow the operation"""

    pass


class ValidationException(TenantTrackerException):
    """Raised for business logic validation errors"""

    pass


class ConflictException(TenantTrackerException):
    """Raised when an operation would break an invariant (occupancy, signatures, dependents)"""

    pass
