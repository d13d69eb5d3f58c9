from .base import (
    AppError,
    AuthenticationRequiredError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthenticationRequiredError",
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
