"""Business logic for shortening, resolving and inspecting links."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .config import Config
from .errors import (
    CannotShortenOwnDomainError,
    FailedToGenerateCodeError,
    InvalidURLError,
    ShortCodeExistsError,
    ShortenerError,
)
from .models import URL, ShortenRequest, ShortenResponse, StatsResponse
from .repository import URLRepository
from .shortcode import generate_short_code
from .validator import is_same_domain, is_valid_url

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 10


class URLService:
    """Shortens URLs, resolves short codes and reports link statistics.

    Click counts are updated in the background; ``close`` waits for
    pending updates. After closing, click counts are updated inline.
    """

    def __init__(self, repo: URLRepository, config: Config, max_workers: int = 4) -> None:
        self._repo = repo
        self._config = config
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="click-count"
        )
        self._lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> "URLService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _short_url(self, short_code: str) -> str:
        return f"{self._config.domain}/{short_code}"

    def shorten_url(self, request: ShortenRequest) -> ShortenResponse:
        """Create a short link for ``request.url``, or reuse an existing one."""
        if not is_valid_url(request.url):
            raise InvalidURLError()
        if is_same_domain(request.url, self._config.domain):
            raise CannotShortenOwnDomainError()

        if request.custom_code:
            if self._repo.short_code_exists(request.custom_code):
                raise ShortCodeExistsError()
            short_code = request.custom_code
        else:
            try:
                existing = self._repo.get_by_original_url(request.url)
            except ShortenerError:
                existing = None
            if existing is not None:
                return ShortenResponse(
                    short_url=self._short_url(existing.short_code),
                    original_url=existing.original_url,
                )
            short_code = self._generate_unique_short_code()

        stored = self._repo.create(URL(short_code=short_code, original_url=request.url))
        return ShortenResponse(
            short_url=self._short_url(short_code),
            original_url=stored.original_url,
        )

    def get_url_stats(self, short_code: str) -> StatsResponse:
        """Return the stored link for ``short_code`` with its full short URL."""
        url = self._repo.get_by_short_code(short_code)
        return StatsResponse(url=url, short_url=self._short_url(url.short_code))

    def redirect_url(self, short_code: str) -> str:
        """Return the target of ``short_code`` and count the click."""
        logger.info("RedirectURL called with shortCode: %s", short_code)
        try:
            url = self._repo.get_by_short_code(short_code)
        except ShortenerError as exc:
            logger.info("Error getting URL for shortCode %s: %s", short_code, exc)
            raise
        self._schedule_increment(short_code)
        return url.original_url

    def close(self) -> None:
        """Wait for pending click-count updates and stop the worker threads."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)

    def _schedule_increment(self, short_code: str) -> None:
        with self._lock:
            if not self._closed:
                self._executor.submit(self._increment, short_code)
                return
        self._increment(short_code)

    def _increment(self, short_code: str) -> None:
        try:
            self._repo.increment_click_count(short_code)
        except Exception as exc:  # a lost click must not disturb anyone
            logger.warning("Failed to count click for %s: %s", short_code, exc)

    def _generate_unique_short_code(self) -> str:
        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = generate_short_code()
            if not self._repo.short_code_exists(code):
                return code
        raise FailedToGenerateCodeError()