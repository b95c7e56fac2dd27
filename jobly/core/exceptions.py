"""
Exceptions raised by the model layer.

Each carries the HTTP status the API layer responds with; the exception
handler registered in main.py does the mapping.
"""


class JoblyError(Exception):
    """Base exception for all Jobly errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Invalid input: empty payload, unknown field, inconsistent filters."""

    status_code = 400


class UnauthorizedError(JoblyError):
    """Missing, invalid or insufficient credentials."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(JoblyError):
    """The targeted record does not exist."""

    status_code = 404


class DuplicateError(JoblyError):
    """A create collided with an existing unique key."""

    status_code = 409
