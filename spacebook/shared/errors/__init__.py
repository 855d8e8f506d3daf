from .base import AppError, ConfigurationError, DomainError
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConfigurationError",
    "DomainError",
    "handle_app_error",
    "register_error_handler",
]
