"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class Unauthenticated(DomainException):
    """Request carries no valid session"""

    pass


class AuthServiceError(DomainException):
    """Auth service returned an error or is unavailable"""

    pass


class ValidationError(DomainException):
    """Report parameters are missing or malformed"""

    pass


class InvalidPeriod(ValidationError):
    """Period token is outside the supported set"""

    pass


class InvalidFormat(ValidationError):
    """Output format is not json or pdf"""

    pass


class InvalidAmount(DomainException):
    """Monetary amount is negative or not a decimal"""

    pass


class StoreUnavailable(DomainException):
    """Ledger store query failed"""

    pass


class RenderFailure(DomainException):
    """Document renderer failed or returned an unusable payload"""

    pass
