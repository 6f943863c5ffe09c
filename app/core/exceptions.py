"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


CATALOG_NOT_FOUND_MESSAGE = "No se encontró el catálogo solicitado."
MALFORMED_RESPONSE_MESSAGE = "La respuesta del catálogo no tiene el formato esperado."


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Sesión requerida", "SESSION_REQUIRED", 401)
        raise AppException("Slug en uso", "SLUG_EXISTS", 409, {"slug": "verano"})

    Error Codes:
        Remote store:
            - CATALOG_NOT_FOUND (404)
            - REMOTE_ERROR (502)
            - MALFORMED_RESPONSE (502)
            - UNEXPECTED_ERROR (500)

        Session:
            - INVALID_CREDENTIALS (401)
            - SESSION_REQUIRED (401)
            - ACCOUNT_DISABLED (403)

        Administration:
            - PRODUCT_NOT_FOUND (404)
            - CATALOG_RECORD_NOT_FOUND (404)
            - SLUG_EXISTS (409)
            - INVALID_SLUG (400)

        Routing:
            - ROUTE_NOT_FOUND (404)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "CATALOG_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Call this in main.py after creating the FastAPI instance.
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def catalog_not_found(slug: Optional[str] = None) -> AppException:
    """Create catalog not found exception (query returned no row)."""
    details = {"slug": slug} if slug else {}
    return AppException(CATALOG_NOT_FOUND_MESSAGE, "CATALOG_NOT_FOUND", 404, details)


def remote_error(message: str) -> AppException:
    """Create remote store failure exception; the store message passes through."""
    return AppException(message, "REMOTE_ERROR", 502)


def malformed_response(reason: Optional[str] = None) -> AppException:
    """Create malformed remote response exception."""
    details = {"reason": reason} if reason else {}
    return AppException(MALFORMED_RESPONSE_MESSAGE, "MALFORMED_RESPONSE", 502, details)


def unexpected_error(message: str) -> AppException:
    """Create unexpected fault exception."""
    return AppException(message, "UNEXPECTED_ERROR", 500)


def invalid_credentials() -> AppException:
    """Create invalid credentials exception."""
    return AppException("Usuario o contraseña incorrectos", "INVALID_CREDENTIALS", 401)


def session_required() -> AppException:
    """Create missing session exception."""
    return AppException("Se requiere iniciar sesión", "SESSION_REQUIRED", 401)


def account_disabled() -> AppException:
    """Create account disabled exception."""
    return AppException("La cuenta está deshabilitada", "ACCOUNT_DISABLED", 403)


def product_not_found(product_id: Optional[str] = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id else {}
    return AppException("Producto no encontrado", "PRODUCT_NOT_FOUND", 404, details)


def catalog_record_not_found(catalog_id: Optional[str] = None) -> AppException:
    """Create admin catalog lookup exception."""
    details = {"catalog_id": catalog_id} if catalog_id else {}
    return AppException("Catálogo no encontrado", "CATALOG_RECORD_NOT_FOUND", 404, details)


def slug_exists(slug: str) -> AppException:
    """Create slug already in use exception."""
    return AppException(
        f"El slug '{slug}' ya está en uso",
        "SLUG_EXISTS",
        409,
        {"slug": slug}
    )


def invalid_slug(slug: str, reason: str) -> AppException:
    """Create invalid slug exception."""
    return AppException(
        f"Slug inválido: {reason}",
        "INVALID_SLUG",
        400,
        {"slug": slug, "reason": reason}
    )


def route_not_found(path: str) -> AppException:
    """Create unknown page route exception."""
    return AppException("Página no encontrada", "ROUTE_NOT_FOUND", 404, {"path": path})


def validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> AppException:
    """Create payload validation exception."""
    return AppException(message, "VALIDATION_ERROR", 422, details)
