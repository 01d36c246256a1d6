"""
Middlewares do core.

Localização: core/middleware/
"""
from .exception_logging_middleware import ExceptionLoggingMiddleware

__all__ = ['ExceptionLoggingMiddleware']
