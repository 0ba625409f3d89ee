"""Translate PostgREST errors into collaborator errors."""

from postgrest.exceptions import APIError

from application.ports.errors import CollaboratorError, PermissionDeniedError

# insufficient_privilege (row level security) and JWT rejected
PERMISSION_CODES = {"42501", "PGRST301", "PGRST302", "401", "403"}


def translate_api_error(error: APIError) -> CollaboratorError:
    """Map a PostgREST APIError onto the CollaboratorError family."""
    message = error.message or str(error)
    if str(error.code) in PERMISSION_CODES:
        return PermissionDeniedError(message)
    return CollaboratorError(message)
