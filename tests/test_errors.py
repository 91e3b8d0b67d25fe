import pytest

from urlshortener.errors import (
    CannotShortenOwnDomainError,
    FailedToGenerateCodeError,
    InvalidURLError,
    RepositoryError,
    ShortCodeExistsError,
    ShortenerError,
    URLNotFoundError,
)


@pytest.mark.parametrize(
    "error_class, text",
    [
        (URLNotFoundError, "url not found"),
        (InvalidURLError, "invalid url"),
        (ShortCodeExistsError, "short code already exists"),
        (CannotShortenOwnDomainError, "cannot shorten own domain"),
        (FailedToGenerateCodeError, "failed to generate unique short code"),
    ],
)
def test_default_messages(error_class, text):
    error = error_class()
    assert str(error) == text
    assert isinstance(error, ShortenerError)


def test_custom_message_overrides_default():
    assert str(URLNotFoundError("missing abc")) == "missing abc"


def test_repository_error_wraps_cause():
    cause = ValueError("boom")
    error = RepositoryError("failed to get URL", cause)
    assert str(error) == "failed to get URL: boom"
    assert error.cause is cause


def test_repository_error_without_cause():
    error = RepositoryError("failed to get URL")
    assert str(error) == "failed to get URL"
    assert error.cause is None


def test_errors_can_be_caught_as_base():
    error = ShortCodeExistsError()
    with pytest.raises(ShortenerError, match="^short code already exists$") as excinfo:
        raise error
    assert excinfo.value is error
    assert str(excinfo.value) == "short code already exists"