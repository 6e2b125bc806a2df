"""Domain-specific exceptions — transport-independent."""

from enum import Enum


class EmptyInputError(ValueError):
    """Raised when paginated responses are combined from an empty list."""

    def __init__(self, message: str = "No JSON argument given."):
        super().__init__(message)


class NotFoundReason(str, Enum):
    """Which lookup check failed, in the order the checks run."""

    POOL_MISSING = "pool_missing"
    NOT_LINKED = "not_linked"
    LANGUAGE_MISSING = "language_missing"
    RECORD_MISSING = "record_missing"
    FIELD_MISSING = "field_missing"
    URL_TYPE_MISSING = "url_type_missing"


class ResourceNotFoundError(LookupError):
    """Base for failed translation / URL lookups."""

    def __init__(self, reason: NotFoundReason, message: str):
        self.reason = reason
        self.message = message
        super().__init__(message)


class TranslationNotFoundError(ResourceNotFoundError):
    """Raised when a translation was requested with ``not_found_error``."""


class UrlNotFoundError(ResourceNotFoundError):
    """Raised when URLs were requested with ``not_found_error``."""


class LinkingFieldMissingError(ResourceNotFoundError):
    """Raised when an object lacks the ``metadatas.uuid`` linking field.

    For URL lookups this is raised regardless of ``not_found_error``: the
    caller passed an object that cannot have metadata at all.
    """

    def __init__(self, message: str = "Given object does not have metadata."):
        super().__init__(NotFoundReason.NOT_LINKED, message)


class ApiRequestError(Exception):
    """Raised when the MyDataShare API returns a non-success status.

    A status code of 0 means the request never got a response.
    """

    def __init__(self, status_code: int, message: str, url: str = ""):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"{status_code}: {message}")


class OidConfigError(Exception):
    """Raised when an AuthItem has no usable OpenID configuration."""


class AuthorizationError(Exception):
    """Raised when an authorization redirect or token exchange fails."""


class InvalidJwtError(ValueError):
    """Raised when a token is not a decodable three-part JWT."""
