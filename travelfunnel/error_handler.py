"""Error handling for the funnel API: funnel errors -> JSON responses."""
from typing import Any, Dict
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from travelfunnel.errors import ConfigurationError, PaymentFailed, ServiceUnavailable, ValidationError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in funnel request: %s", exc, exc_info=True)
        return {
            "success": False,
            "error": "An internal error occurred while processing your request. Please try again later.",
            "metadata": {"type": type(exc).__name__, "context": context or {}},
        }


_error_handler = ErrorHandler()


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s: %s %s", request.url.path, exc.message, exc.field_errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message, "field_errors": exc.field_errors},
    )


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("%s called without configuration: missing %s", request.url.path, ", ".join(exc.missing))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server configuration error"},
    )


async def service_unavailable_handler(request: Request, exc: ServiceUnavailable) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(exc)})


async def payment_failed_handler(request: Request, exc: PaymentFailed) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": str(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_handler.handle_exception(exc, {"path": request.url.path}),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(ServiceUnavailable, service_unavailable_handler)
    app.add_exception_handler(PaymentFailed, payment_failed_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
