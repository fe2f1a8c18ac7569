"""Typed failures raised by league services."""


class ColegasError(Exception):
    """Base class for all league errors.

    Carries a human-readable message and the HTTP status the API layer
    answers with.
    """

    http_status = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ColegasError):
    http_status = 404

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f'{entity} not found: {entity_id}')


class ValidationError(ColegasError):
    """Malformed input: negative counts, unknown roles, bad rosters."""

    http_status = 400


class PermissionDeniedError(ColegasError):
    http_status = 403


class ConflictError(ColegasError):
    http_status = 409


class AuthenticationError(ColegasError):
    http_status = 401


class ComputationError(ColegasError):
    """Arithmetic produced a non-finite score."""

    http_status = 500
