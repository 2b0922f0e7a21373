class AppException(Exception):
    """Application exception with message, status code, and optional data."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None, data: dict = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data or {}
        super().__init__(self.message)


class DuplicateKeyException(AppException):
    """Raised by a token store when a token value already exists."""

    status_code = 409


class TokenNotFoundException(AppException):
    """Raised when a refresh token to rotate is missing, already rotated, revoked or expired."""

    status_code = 401
