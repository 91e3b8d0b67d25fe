"""Storage of short links."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy import Engine, exists, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from .database import urls
from .errors import RepositoryError, URLNotFoundError
from .models import URL


class URLRepository(ABC):
    """Interface to a store of short links."""

    @abstractmethod
    def create(self, url: URL) -> URL:
        """Store ``url``, filling in its id and creation time."""

    @abstractmethod
    def get_by_short_code(self, short_code: str) -> URL:
        """Return the link for ``short_code`` or raise URLNotFoundError."""

    @abstractmethod
    def get_by_original_url(self, original_url: str) -> URL:
        """Return a link for ``original_url`` or raise URLNotFoundError."""

    @abstractmethod
    def increment_click_count(self, short_code: str) -> None:
        """Add one to the click count of ``short_code``."""

    @abstractmethod
    def short_code_exists(self, short_code: str) -> bool:
        """Tell whether ``short_code`` is taken."""


class SQLURLRepository(URLRepository):
    """Link store backed by an SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, url: URL) -> URL:
        statement = insert(urls).values(short_code=url.short_code, original_url=url.original_url)
        try:
            with self._engine.begin() as connection:
                new_id = connection.execute(statement).inserted_primary_key[0]
                created_at = connection.execute(
                    select(urls.c.created_at).where(urls.c.id == new_id)
                ).scalar_one()
        except SQLAlchemyError as exc:
            raise RepositoryError("failed to create URL", exc) from exc
        url.id = new_id
        url.created_at = created_at
        return url

    def _get_one(self, column, value: str) -> URL:
        query = select(
            urls.c.id, urls.c.short_code, urls.c.original_url, urls.c.created_at, urls.c.click_count
        ).where(column == value).limit(1)
        try:
            with self._engine.connect() as connection:
                row = connection.execute(query).first()
        except SQLAlchemyError as exc:
            raise RepositoryError("failed to get URL", exc) from exc
        if row is None:
            raise URLNotFoundError()
        return URL(
            id=row.id,
            short_code=row.short_code,
            original_url=row.original_url,
            created_at=row.created_at,
            click_count=row.click_count or 0,
        )

    def get_by_short_code(self, short_code: str) -> URL:
        return self._get_one(urls.c.short_code, short_code)

    def get_by_original_url(self, original_url: str) -> URL:
        return self._get_one(urls.c.original_url, original_url)

    def increment_click_count(self, short_code: str) -> None:
        statement = (
            update(urls)
            .where(urls.c.short_code == short_code)
            .values(click_count=urls.c.click_count + 1)
        )
        try:
            with self._engine.begin() as connection:
                connection.execute(statement)
        except SQLAlchemyError as exc:
            raise RepositoryError("failed to increment click count", exc) from exc

    def short_code_exists(self, short_code: str) -> bool:
        query = select(exists().where(urls.c.short_code == short_code))
        try:
            with self._engine.connect() as connection:
                return bool(connection.execute(query).scalar())
        except SQLAlchemyError as exc:
            raise RepositoryError("failed to check short code existence", exc) from exc