class ServiceError(Exception):
    """Base for errors a caller can act on; carries the HTTP status to use."""

    status = 400

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ValidationError(ServiceError):
    status = 400


class NotFoundError(ServiceError):
    status = 404


class ConflictError(ServiceError):
    """The record is not in the state the operation expects."""
    status = 409


class PaymentError(ServiceError):
    status = 402


class ExternalServiceError(ServiceError):
    status = 502


__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PaymentError",
    "ExternalServiceError",
]
