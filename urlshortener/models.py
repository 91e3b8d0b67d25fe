"""Data objects exchanged between the layers and over the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping


@dataclass
class URL:
    """A stored short link."""

    short_code: str = ""
    original_url: str = ""
    id: int = 0
    created_at: datetime | None = None
    click_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of this link."""
        return {
            "id": self.id,
            "short_code": self.short_code,
            "original_url": self.original_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "click_count": self.click_count,
        }


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass
class ShortenRequest:
    """A request to shorten ``url``, optionally under ``custom_code``."""

    url: str
    custom_code: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ShortenRequest":
        """Build a request from decoded JSON; raises ValueError on bad input."""
        if not isinstance(data, Mapping):
            raise ValueError("request body must be a JSON object")
        return cls(
            url=_string_field(data, "url"),
            custom_code=_string_field(data, "custom_code"),
        )


@dataclass
class ShortenResponse:
    """The result of shortening a URL."""

    short_url: str
    original_url: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of this response."""
        return {"short_url": self.short_url, "original_url": self.original_url}


@dataclass
class StatsResponse:
    """A stored link together with its full short URL."""

    url: URL
    short_url: str

    def to_dict(self) -> dict[str, Any]:
        """Return the link's fields with ``short_url`` added."""
        return {**self.url.to_dict(), "short_url": self.short_url}