"""
MangaBot Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       the `{success: false, ...}` envelope with the right HTTP status.
Who:   Raised by services, routes and the auth guard.

Exception Hierarchy:
    MangaBotError (base)
    ├── ValidationError       → 400 Bad Request
    ├── AuthenticationError   → 401 Unauthorized
    ├── NotFoundError         → 404 Not Found
    └── DatabaseError         → 500 Internal Server Error

    The `message` is returned to the caller; `context` is only logged.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MangaBotError(Exception):
    """
    Base exception for all MangaBot application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "Ocurrió un error inesperado",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MangaBotError):
    """
    Raised when client input fails validation.

    When:    Null body, path/body id mismatch, empty search parameter,
             loan pointing at a manga that does not exist.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Los datos enviados no son válidos",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(MangaBotError):
    """
    Raised by the bearer-token guard.

    When:    Missing Authorization header, malformed/badly-signed/expired token.
    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Se requiere autenticación",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MangaBotError):
    """
    Raised when a requested record does not exist.

    Services return None for a missing record on reads; routes convert that
    into this exception. `update_*` raises it directly (replace-or-fail).
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "registro",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No se encontró el {resource}"
        if resource_id is not None:
            message = f"No se encontró el {resource} con ID {resource_id}"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(MangaBotError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, driver error.
    HTTP:    500 Internal Server Error

    Security Note:
        The message is an operation-level summary ("Error al crear el manga").
        The original exception type lives in `context` and is logged
        server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "Error interno del servidor",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def database_error(message: str, exc: Exception, **context: Any) -> DatabaseError:
    """
    Log an unexpected persistence failure and wrap it for the caller.

    Usage in services:
        except Exception as e:
            raise database_error("Error al crear el manga", e)
    """
    logger.error("%s: %s", message, str(exc), exc_info=True)
    context["original_error"] = type(exc).__name__
    return DatabaseError(message=message, context=context)
