"""URL shortening web service with redirects, click statistics and custom codes."""

__version__ = "0.1.0"