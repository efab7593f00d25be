"""Domain error taxonomy and its translation into API responses.

Service-layer code raises subclasses of ``DomainError``; it never builds
HTTP responses.  ``DomainExceptionHandler`` (wired through
``DRF_STANDARDIZED_ERRORS``) converts them into DRF API exceptions so every
failure is rendered in the standard body::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Unexpected exceptions are reduced to a generic ``server_error``; the
original message only reaches the logs.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from rest_framework import exceptions, status

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule failures raised by the service layer."""

    code = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(DomainError):
    """Malformed input that the caller can fix."""

    code = "invalid"
    default_message = "Invalid request."


class ProfileError(DomainError):
    """The acting user's delivery profile is missing or incomplete."""

    code = "profile_error"
    default_message = "Complete your customer profile before placing orders."


class BusinessRuleConflict(DomainError):
    """The request is well-formed but conflicts with current state."""

    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "The request conflicts with the current state."


class NotFound(DomainError):
    """A referenced entity does not exist."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class TransactionFailure(DomainError):
    """The backing store could not complete the unit of work."""

    code = "transaction_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The operation could not be completed. Please try again."


class DomainAPIException(exceptions.APIException):
    """DRF exception carrying the status, code and message of a ``DomainError``."""

    def __init__(self, error: DomainError) -> None:
        self.status_code = error.status_code
        super().__init__(detail=error.message, code=error.code)


class DomainExceptionHandler(ExceptionHandler):
    """Standardized-errors handler that understands ``DomainError``."""

    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, ValidationFailed):
            return exceptions.ValidationError(detail=exc.message, code=exc.code)
        if isinstance(exc, TransactionFailure):
            # The wrapped database error is never shown to the client.
            logger.error("api.transaction_failure", error=repr(exc.__cause__))
            return DomainAPIException(TransactionFailure())
        if isinstance(exc, DomainError):
            logger.info(
                "api.domain_error",
                code=exc.code,
                status_code=exc.status_code,
                detail=exc.message,
            )
            return DomainAPIException(exc)
        return super().convert_known_exceptions(exc)

    def convert_unhandled_exceptions(self, exc: Exception) -> exceptions.APIException:
        if not isinstance(exc, exceptions.APIException):
            logger.error("api.unhandled_exception", error=repr(exc))
            return exceptions.APIException()
        return exc
