# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base for errors that cross the service boundary with a status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(StorefrontError):
    status_code = 404


class InvalidInput(StorefrontError):
    status_code = 400


class Conflict(StorefrontError):
    status_code = 409


class Internal(StorefrontError):
    status_code = 500
