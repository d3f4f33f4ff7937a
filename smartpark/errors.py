# smartpark/errors.py
"""
Domain exceptions raised by services and rendered by the handlers in main.py
as {"message": ...} with the carried HTTP status.
"""


class SmartParkError(Exception):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
        self.message = message


class ValidationError(SmartParkError):
    status_code = 400


class AuthError(SmartParkError):
    status_code = 401


class PermissionDeniedError(SmartParkError):
    status_code = 403


class NotFoundError(SmartParkError):
    status_code = 404


class ConflictError(SmartParkError):
    status_code = 409


class InternalError(SmartParkError):
    status_code = 500
