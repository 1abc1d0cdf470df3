"""
Domain exceptions for the purchasing business logic

These exceptions represent business rule violations. They are raised by the
business layer and surfaced unchanged to the caller; the JSON API maps each
one to an HTTP status.
"""


class DomainError(Exception):
    """Base exception for all purchasing domain errors"""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when an input value is missing or malformed"""

    def __init__(self, field, message):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist"""
    pass


class ForbiddenError(DomainError):
    """Raised when an authenticated actor may not perform a mutation"""
    pass


class ConflictError(DomainError):
    """Raised when a uniqueness rule is violated (email, SKU)"""
    pass


class AuthenticationError(DomainError):
    """Base exception for login failures"""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when the email is unknown or the password does not match"""
    pass


class PendingApprovalError(AuthenticationError):
    """Raised when the account still awaits administrator approval"""
    pass


class RejectedError(AuthenticationError):
    """Raised when an administrator rejected the account"""
    pass


class SelfRemovalError(DomainError):
    """Raised when a user tries to remove their own account"""
    pass
