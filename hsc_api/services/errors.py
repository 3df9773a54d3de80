"""Domain errors raised by services and rendered by the API error handlers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors that map to a stable API error code."""

    code = "service_error"
    status_code = 400

    def __init__(self, code: str | None = None, *, status_code: int | None = None):
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.code)


class InvalidFieldError(ServiceError):
    """A submitted field failed validation (e.g. ``invalid_slug``)."""


class NoFieldsToUpdateError(ServiceError):
    code = "no_fields_to_update"


class SlugAlreadyExistsError(ServiceError):
    code = "slug_already_exists"
    status_code = 409


class MissingFieldsError(ServiceError):
    """Required fields were absent or blank; ``required`` lists them all."""

    code = "missing_fields"

    def __init__(self, required: list[str]):
        super().__init__()
        self.required = required
