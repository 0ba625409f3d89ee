"""Errors raised by collaborator adapters.

Adapters translate storage-specific failures into these types so agent
functions can classify them without knowing the backend.
"""


class CollaboratorError(Exception):
    """A collaborator call failed for a reason the caller cannot fix."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PermissionDeniedError(CollaboratorError):
    """The collaborator refused access (missing rows policy, expired token)."""


class NotFoundError(CollaboratorError):
    """The requested record does not exist or is not owned by the caller."""


def is_permission_error(error: BaseException) -> bool:
    """True for PermissionDeniedError or any error whose text reads like one."""
    if isinstance(error, PermissionDeniedError):
        return True
    text = str(error).lower()
    return "permission" in text or "insufficient" in text
