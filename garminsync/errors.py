"""Exception hierarchy for the Garmin Connect client."""

from __future__ import annotations


class GarminError(Exception):
    """Base class for every error raised by the package.

    Raised directly, it carries a free-form message.
    """

    template = "{detail}"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(self.template.format(detail=detail))


class AuthenticationError(GarminError):
    """Login or token handling failed."""

    template = "Authentication error: {detail}"


class NotAuthenticatedError(GarminError):
    """No stored credentials are available."""

    template = "Authentication required. Please run 'garmin auth login' first."


class MfaRequiredError(GarminError):
    """The account requires a multi-factor authentication step."""

    template = "MFA required"


class RateLimitedError(GarminError):
    """The server answered with HTTP 429."""

    template = "Rate limited. Please wait before retrying."


class NotFoundError(GarminError):
    """The requested resource does not exist."""

    template = "Not found: {detail}"


class ApiError(GarminError):
    """The API answered with an unexpected HTTP status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        Exception.__init__(self, f"API error {status}: {message}")
        self.detail = message


class HttpError(GarminError):
    """The HTTP transport failed."""

    template = "HTTP error: {detail}"


class InvalidResponseError(GarminError):
    """The server answered with something that could not be understood."""

    template = "Invalid response: {detail}"


class JsonError(GarminError):
    """JSON could not be encoded or decoded."""

    template = "JSON error: {detail}"


class IoError(GarminError):
    """A filesystem operation failed."""

    template = "IO error: {detail}"


class ConfigError(GarminError):
    """The configuration is missing or unusable."""

    template = "Configuration error: {detail}"


class DatabaseError(GarminError):
    """The local database reported a failure."""

    template = "Database error: {detail}"


class KeyringError(GarminError):
    """The credential store reported a failure."""

    template = "Keyring error: {detail}"


class InvalidDateFormatError(GarminError):
    """A date argument was not in YYYY-MM-DD form."""

    template = "Invalid date format: {detail}. Expected YYYY-MM-DD"


class InvalidParameterError(GarminError):
    """An argument had an unacceptable value."""

    template = "Invalid parameter: {detail}"