import threading
from datetime import datetime

import pytest

from urlshortener.config import Config
from urlshortener.errors import (
    CannotShortenOwnDomainError,
    FailedToGenerateCodeError,
    InvalidURLError,
    RepositoryError,
    ShortCodeExistsError,
    URLNotFoundError,
)
from urlshortener.models import URL, ShortenRequest
from urlshortener.repository import URLRepository
from urlshortener.service import MAX_GENERATION_ATTEMPTS, URLService


class MemoryRepository(URLRepository):
    def __init__(self):
        self.urls = {}
        self._lock = threading.Lock()

    def create(self, url):
        with self._lock:
            url.id = len(self.urls) + 1
            url.created_at = datetime.now()
            self.urls[url.short_code] = url
        return url

    def get_by_short_code(self, short_code):
        try:
            return self.urls[short_code]
        except KeyError:
            raise URLNotFoundError() from None

    def get_by_original_url(self, original_url):
        for url in self.urls.values():
            if url.original_url == original_url:
                return url
        raise URLNotFoundError()

    def increment_click_count(self, short_code):
        with self._lock:
            if short_code not in self.urls:
                raise URLNotFoundError()
            self.urls[short_code].click_count += 1

    def short_code_exists(self, short_code):
        return short_code in self.urls


class AlwaysTakenRepository(MemoryRepository):
    def __init__(self):
        super().__init__()
        self.checks = 0

    def short_code_exists(self, short_code):
        self.checks += 1
        return True


class BrokenLookupRepository(MemoryRepository):
    def get_by_original_url(self, original_url):
        raise RepositoryError("failed to get URL", RuntimeError("down"))


@pytest.fixture
def repo():
    return MemoryRepository()


@pytest.fixture
def service(repo):
    svc = URLService(repo, Config(domain="http://test.com"))
    yield svc
    svc.close()


@pytest.mark.parametrize(
    "url, error",
    [
        ("not-a-url", InvalidURLError),
        ("http://test.com/page", CannotShortenOwnDomainError),
    ],
)
def test_shorten_url_errors(service, url, error):
    with pytest.raises(error):
        service.shorten_url(ShortenRequest(url=url))


def test_shorten_valid_url(service, repo):
    resp = service.shorten_url(ShortenRequest(url="https://example.com/test"))
    assert resp.original_url == "https://example.com/test"
    assert resp.short_url.startswith("http://test.com/")
    code = resp.short_url.rsplit("/", 1)[1]
    assert repo.urls[code].original_url == "https://example.com/test"


def test_shorten_with_custom_code(service):
    resp1 = service.shorten_url(
        ShortenRequest(url="https://example.com", custom_code="custom123")
    )
    assert "custom123" in resp1.short_url
    with pytest.raises(ShortCodeExistsError):
        service.shorten_url(ShortenRequest(url="https://other.com", custom_code="custom123"))


def test_shorten_same_url_reuses_code(service, repo):
    first = service.shorten_url(ShortenRequest(url="https://example.com/a"))
    second = service.shorten_url(ShortenRequest(url="https://example.com/a"))
    assert first.short_url == second.short_url
    assert len(repo.urls) == 1


def test_custom_code_does_not_reuse_existing(service, repo):
    service.shorten_url(ShortenRequest(url="https://example.com/a"))
    resp = service.shorten_url(ShortenRequest(url="https://example.com/a", custom_code="mine"))
    assert resp.short_url == "http://test.com/mine"
    assert len(repo.urls) == 2


def test_failed_lookup_of_original_still_shortens():
    repo = BrokenLookupRepository()
    with URLService(repo, Config(domain="http://test.com")) as svc:
        resp = svc.shorten_url(ShortenRequest(url="https://example.com/x"))
    assert resp.original_url == "https://example.com/x"
    assert len(repo.urls) == 1


def test_generation_gives_up_after_max_attempts():
    repo = AlwaysTakenRepository()
    with URLService(repo, Config(domain="http://test.com")) as svc:
        with pytest.raises(FailedToGenerateCodeError):
            svc.shorten_url(ShortenRequest(url="https://example.com"))
    assert repo.checks == MAX_GENERATION_ATTEMPTS


def test_get_url_stats(service, repo):
    repo.create(URL(short_code="abc", original_url="https://example.com"))
    stats = service.get_url_stats("abc")
    assert stats.short_url == "http://test.com/abc"
    assert stats.url.original_url == "https://example.com"


def test_get_url_stats_missing(service):
    with pytest.raises(URLNotFoundError):
        service.get_url_stats("missing")


def test_redirect_counts_clicks(service, repo):
    repo.create(URL(short_code="abc", original_url="https://example.com"))
    assert service.redirect_url("abc") == "https://example.com"
    assert service.redirect_url("abc") == "https://example.com"
    service.close()
    assert repo.urls["abc"].click_count == 2


def test_redirect_after_close_counts_inline(service, repo):
    repo.create(URL(short_code="abc", original_url="https://example.com"))
    service.close()
    service.redirect_url("abc")
    assert repo.urls["abc"].click_count == 1


def test_redirect_missing(service):
    with pytest.raises(URLNotFoundError):
        service.redirect_url("missing")