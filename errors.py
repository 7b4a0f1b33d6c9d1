"""
Error types for the registration service.

Every failure a request can end in is a RegistrationError. The router turns
them into a JSON body of the form {"error": message}; 500s add a "message"
explaining what could not be done, never the internal cause.
"""

from typing import List, Optional


class RegistrationError(Exception):
    status_code = 500
    code = "InternalError"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class InvalidJson(RegistrationError):
    status_code = 400
    code = "InvalidJson"
    message = "Invalid JSON in request body"


class ValidationFailure(RegistrationError):
    status_code = 400
    code = "ValidationFailure"
    message = "Invalid registration data"


class MissingFields(ValidationFailure):
    code = "MissingFields"

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class InvalidEmail(ValidationFailure):
    code = "InvalidEmail"
    message = "Invalid email format"


class InvalidQuantity(ValidationFailure):
    code = "InvalidQuantity"
    message = "Quantity must be a number between 1 and 10"


class InvalidTicketType(ValidationFailure):
    code = "InvalidTicketType"
    message = "Invalid ticket type"


class InvalidRecord(ValidationFailure):
    code = "InvalidRecord"


class RouteNotFound(RegistrationError):
    status_code = 404
    code = "RouteNotFound"
    message = "Route not found"


class InternalError(RegistrationError):
    """Generic 500. `detail` is the user-facing explanation."""

    def __init__(self, detail: str = "Unable to process registration at this time"):
        self.detail = detail
        super().__init__()

    def to_body(self) -> dict:
        return {"error": self.message, "message": self.detail}


class StoreError(Exception):
    """Raised by a RegistrationStore when the backend fails. Nothing is
    assumed to have been written."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f"{operation} failed"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
