"""Error types raised by the URL shortener."""

from __future__ import annotations


class ShortenerError(Exception):
    """Base class for all URL shortener errors."""

    default_message = "url shortener error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class URLNotFoundError(ShortenerError):
    """No URL is stored under the requested short code."""

    default_message = "url not found"


class InvalidURLError(ShortenerError):
    """The URL is not an absolute http or https URL."""

    default_message = "invalid url"


class ShortCodeExistsError(ShortenerError):
    """The requested custom short code is already taken."""

    default_message = "short code already exists"


class CannotShortenOwnDomainError(ShortenerError):
    """The URL points at the shortener's own domain."""

    default_message = "cannot shorten own domain"


class FailedToGenerateCodeError(ShortenerError):
    """No free short code was found within the allowed attempts."""

    default_message = "failed to generate unique short code"


class RepositoryError(ShortenerError):
    """A storage operation failed; the underlying error is kept as ``cause``."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)