from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        if detail:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Malformed input. Shown inline on the form, never retried."""

    status_code = 422
    code = "validation_error"
    detail = "The submitted data is invalid."


class AuthorizationError(AppError):
    """The actor's role does not permit the attempted transition."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "authorization_error"
    detail = "You do not have permission to perform this action."


class InvalidStateError(AppError):
    """The record is not in the state the transition starts from."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_state"
    detail = "This request has already been resolved."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    detail = "This request is no longer available."


class TransportError(AppError):
    """The data store could not be reached or failed mid-operation."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "transport_error"
    detail = "The data store is unavailable. Please try again."
