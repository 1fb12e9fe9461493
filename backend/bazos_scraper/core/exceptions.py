"""
Errors raised by the scraping pipeline.

Only InvalidSearchError and ScrapeError leave the core; FetchError is
caught by the pagination engine (and wrapped) or by detail enrichment
(and downgraded to a warning).
"""
from typing import Optional


class BazosScraperError(Exception):
    """Base class for every error raised by this package."""


class InvalidSearchError(BazosScraperError):
    """Search parameters failed validation. Raised before any request is made."""


class FetchError(BazosScraperError):
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ScrapeError(BazosScraperError):
    """A result page could not be fetched; the whole scrape is abandoned."""
