"""
Domain errors raised by the service layer.

Routes never build error responses for these themselves: the handlers
registered in app.main translate them into HTTP responses.
"""
from typing import Optional


class DomainError(Exception):
    """Base class for business errors with a user-facing message."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Entity does not exist or is not owned by the requesting user."""


class ValidationError(DomainError):
    """Malformed input or a violated business rule (e.g. insufficient funds)."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def parse_enum(enum_cls, value, field: str):
    """Coerce value to a member of enum_cls or raise ValidationError."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field}: {value} (expected one of {allowed})", field=field)
