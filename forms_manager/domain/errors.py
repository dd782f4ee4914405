"""Domain error taxonomy.

Every error raised deliberately by the repositories and services is an
``ApplicationError``. Each carries the HTTP status the route layer maps it
to, so the API error handler never has to inspect messages.
"""

from typing import Any, Dict, List, Optional


class ApplicationError(Exception):
    """Base class for domain errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.cause = cause
        self.details = details
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(ApplicationError):
    """Entity, document or sub-entity absent."""

    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ApplicationError):
    """Duplicate key, or a write that touched an unexpected number of rows."""

    status_code = 409
    error_code = "CONFLICT"


class BadRequestError(ApplicationError):
    """Operation not allowed for the current input or state."""

    status_code = 400
    error_code = "BAD_REQUEST"


class InternalError(ApplicationError):
    """Unexpected database or transport failure. The original is kept as ``cause``."""

    status_code = 500
    error_code = "INTERNAL_ERROR"


class FormIsLiveError(BadRequestError):
    """Mutation attempted against a live form."""

    error_code = "FORM_IS_LIVE"


class FormAlreadyExistsError(BadRequestError):
    """Slug collision on create or title update."""

    error_code = "FORM_ALREADY_EXISTS"

    def __init__(self, slug: str, cause: Optional[BaseException] = None):
        self.slug = slug
        super().__init__(f"Form with slug {slug} already exists", cause=cause)


class DuplicatePagePathError(ConflictError):
    """A page path already used elsewhere in the definition."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.error_code = error_code


class InvalidFormDefinitionError(BadRequestError):
    """Definition failed schema validation. ``causes`` lists each failure."""

    error_code = "INVALID_FORM_DEFINITION"

    def __init__(self, message: str, causes: List[Dict[str, Any]]):
        self.causes = causes
        super().__init__(message, details={"causes": causes})


class IrreversibleMigrationError(BadRequestError):
    """A one-way migration was asked to run backwards."""

    error_code = "IRREVERSIBLE_MIGRATION"


def wrap_error(error: Exception) -> ApplicationError:
    """Pass ``ApplicationError`` through unchanged, wrap anything else."""
    if isinstance(error, ApplicationError):
        return error
    return InternalError(str(error) or error.__class__.__name__, cause=error)
