"""Error hierarchy for the page store.

Every error carries the HTTP status the web layer answers with, so a single
exception handler per class can turn it into a response.
"""

from typing import Any, Dict, List, Optional


class WikiError(Exception):
    """Base class for all errors raised by the page store."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WikiError):
    """Input rejected before anything was persisted.

    ``errors`` maps a field name (``name``, ``content``, ``id``) to the list of
    messages for that field so the caller can re-display them next to the form.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("; ".join(msg for messages in errors.values() for msg in messages))


class ProtectedPageError(ValidationError):
    """The home page cannot be deleted."""

    status_code = 403

    def __init__(self, page_name: str):
        super().__init__({"id": [f"The home page '{page_name}' cannot be deleted."]})
        self.page_name = page_name


class NotFoundError(WikiError):
    """A page, attachment or blob id does not exist.

    ``page`` holds the owning page when the lookup failed below page level
    (e.g. an attachment that is not on the page), so callers can go back to it.
    """

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any, page: Optional[Any] = None):
        super().__init__(f"{resource_type} '{resource_id}' not found")
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.page = page


class StorageError(WikiError):
    """The embedded database or the filesystem failed."""

    status_code = 500

    def __init__(self, operation: str, target: Any = None, cause: Optional[BaseException] = None):
        message = f"Storage failure during {operation}"
        if target is not None:
            message += f" ({target})"
        super().__init__(message)
        self.operation = operation
        self.target = target
        self.cause = cause
