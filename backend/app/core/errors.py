"""Application error taxonomy.

Every error carries the HTTP status it maps to; the handlers in ``main``
render them as ``{"error": message}``.
"""


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class Unauthenticated(AppError):
    status_code = 401
    message = "Token required"


class MalformedAuthHeader(AppError):
    status_code = 401
    message = "Malformed Authorization header"


class InvalidToken(AppError):
    status_code = 403
    message = "Invalid token signature"


class TokenRevoked(AppError):
    status_code = 403
    message = "Token not recognized, please login again"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class Conflict(AppError):
    status_code = 409
    message = "Already exists"


class StorageError(AppError):
    status_code = 500
    message = "Database error"
