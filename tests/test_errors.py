import pytest

from garminsync.errors import (
    ApiError,
    AuthenticationError,
    ConfigError,
    DatabaseError,
    GarminError,
    HttpError,
    InvalidDateFormatError,
    InvalidParameterError,
    InvalidResponseError,
    IoError,
    JsonError,
    KeyringError,
    MfaRequiredError,
    NotAuthenticatedError,
    NotFoundError,
    RateLimitedError,
)


def test_error_display():
    err = AuthenticationError("Invalid credentials")
    assert str(err) == "Authentication error: Invalid credentials"


def test_not_authenticated_error():
    err = NotAuthenticatedError()
    assert "garmin auth login" in str(err)


def test_rate_limited_error():
    err = RateLimitedError()
    assert "Rate limited" in str(err)


def test_invalid_date_format_error():
    err = InvalidDateFormatError("not-a-date")
    assert "not-a-date" in str(err)
    assert "YYYY-MM-DD" in str(err)


@pytest.mark.parametrize(
    "cls, detail",
    [
        (AuthenticationError, "test auth"),
        (ConfigError, "test config"),
        (InvalidResponseError, "bad response"),
        (InvalidParameterError, "bad param"),
    ],
)
def test_error_constructors(cls, detail):
    err = cls(detail)
    assert isinstance(err, GarminError)
    assert err.detail == detail
    assert detail in str(err)


def test_api_error_message():
    err = ApiError(404, "missing")
    assert str(err) == "API error 404: missing"
    assert err.status == 404
    assert err.message == "missing"


def test_other_error_is_plain_message():
    assert str(GarminError("something odd")) == "something odd"


@pytest.mark.parametrize(
    "cls, expected",
    [
        (NotFoundError, "Not found: x"),
        (HttpError, "HTTP error: x"),
        (JsonError, "JSON error: x"),
        (IoError, "IO error: x"),
        (DatabaseError, "Database error: x"),
        (KeyringError, "Keyring error: x"),
        (ConfigError, "Configuration error: x"),
        (InvalidParameterError, "Invalid parameter: x"),
    ],
)
def test_prefixed_messages(cls, expected):
    assert str(cls("x")) == expected


def test_mfa_required_message():
    assert str(MfaRequiredError()) == "MFA required"


def test_errors_can_be_caught_as_base():
    err = DatabaseError("boom")
    assert str(err) == "Database error: boom"
    assert err.detail == "boom"
    with pytest.raises(GarminError, match="Database error: boom"):
        raise err