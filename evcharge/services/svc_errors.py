from fastapi import HTTPException


class ServiceError(HTTPException):
    """
    Base for errors raised by the services.

    The detail is a structured object so clients can branch on `code` and
    show `message` to the user.
    """

    status_code_for_error = 500
    code = "internal_error"
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = None, headers: dict = None):
        self.message = message or self.default_message
        super().__init__(
            status_code=self.status_code_for_error,
            detail={"code": self.code, "message": self.message},
            headers=headers,
        )


class AuthenticationRequired(ServiceError):
    status_code_for_error = 401
    code = "authentication_required"
    default_message = "You must be logged in to perform this action"

    def __init__(self, message: str = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class PermissionDenied(ServiceError):
    status_code_for_error = 403
    code = "permission_denied"
    default_message = "You don't have permission to perform this action"


class BookingNotFound(ServiceError):
    status_code_for_error = 404
    code = "not_found"
    default_message = "Booking not found"


class StationNotFound(ServiceError):
    status_code_for_error = 404
    code = "not_found"
    default_message = "Station not found"


class SlotUnavailable(ServiceError):
    status_code_for_error = 409
    code = "slot_unavailable"
    default_message = "This time slot is already booked. Please select another time."


class ValidationError(ServiceError):
    status_code_for_error = 400
    code = "validation_error"
    default_message = "Invalid request"


class StoreUnavailable(ServiceError):
    status_code_for_error = 503
    code = "store_unavailable"
    default_message = "The booking store is unavailable. Please try again."
