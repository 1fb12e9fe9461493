from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from bazos_scraper.models.listing import Listing, SearchFilters


class ListingSource(ABC):
    """
    Markup contract of a classifieds site: how to address a search and how
    to read its result pages. Implementations only parse HTML they are
    handed, so they can be exercised against captured pages.
    """

    @abstractmethod
    def build_url(self, filters: SearchFilters) -> str:
        pass

    @abstractmethod
    def page_url(self, url: str, offset: int) -> str:
        pass

    @abstractmethod
    def parse_total_count(self, html: str) -> int:
        pass

    @abstractmethod
    def parse_listing_fragments(self, html: str) -> List[Tag]:
        pass

    @abstractmethod
    def parse_card(
        self,
        fragment: Tag,
        published_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Listing]:
        pass

    def extract_details(self, html: str) -> dict:
        """Extracts extra fields from a detail page HTML."""
        return {}

    def enrich_with_details(self, fetcher, listing: Listing) -> Listing:
        return listing

    def _soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", "html.parser")
