import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from bazos_scraper.core.config import MAX_OFFSET, PAGE_SIZE, TOTAL_RESULTS_FALLBACK
from bazos_scraper.core.exceptions import BazosScraperError, FetchError, ScrapeError
from bazos_scraper.models.listing import (
    Listing,
    ScrapeErrorItem,
    ScrapeOutput,
    SearchFilters,
    SearchResult,
    SortOrder,
)
from bazos_scraper.scrapers.base import ListingSource
from bazos_scraper.scrapers.bazos import BazosScraper
from bazos_scraper.scrapers.fetcher import HttpFetcher

logger = logging.getLogger(__name__)


class SearchService:
    """
    Runs Bazos searches: builds the search URL, walks the result pages and
    collects listings until the requested limit or a stop condition.

    Requests are strictly sequential. A failed result page aborts the whole
    search with ScrapeError; a failed detail page only loses the extra fields.
    """

    def __init__(
        self,
        fetcher_factory: Callable[[], Any] = HttpFetcher,
        scraper_factory: Callable[..., ListingSource] = BazosScraper,
    ):
        self.fetcher_factory = fetcher_factory
        self.scraper_factory = scraper_factory

    def search(self, filters: SearchFilters, now: Optional[datetime] = None) -> ScrapeOutput:
        scraper = self.scraper_factory(filters.country)
        result = self.scrape(filters, now=now, scraper=scraper)
        return ScrapeOutput(
            search_term=filters.search,
            location=filters.location,
            distance=filters.distance,
            min_price=filters.min_price,
            max_price=filters.max_price,
            order=filters.order,
            results_limit=filters.results_limit,
            published_days=filters.published_days,
            with_full_descriptions=filters.with_full_descriptions,
            country=filters.country,
            search_url=scraper.build_url(filters),
            listings=result.listings,
            total_found=result.total_found,
            total_returned=result.total_returned,
        )

    def scrape(
        self,
        filters: SearchFilters,
        now: Optional[datetime] = None,
        scraper: Optional[ListingSource] = None,
    ) -> SearchResult:
        scraper = scraper or self.scraper_factory(filters.country)
        now = now or datetime.now()
        url = scraper.build_url(filters)
        logger.info("Searching %r on %s: %s", filters.search, filters.country.value, url)

        fetcher = self.fetcher_factory()
        try:
            listings = []
            first_page = fetcher.fetch(url)

            total_found = scraper.parse_total_count(first_page)
            # Unparseable banner: paginate as if there were plenty, report 0
            total_for_paging = total_found or max(filters.results_limit, TOTAL_RESULTS_FALLBACK)
            effective_limit = min(total_for_paging, filters.results_limit)
            logger.info("Site reports %s results, collecting up to %s", total_found, effective_limit)

            offset = 0
            while len(listings) < effective_limit:
                html = first_page if offset == 0 else fetcher.fetch(scraper.page_url(url, offset))
                fragments = scraper.parse_listing_fragments(html)
                if not fragments:
                    logger.info("No listings at offset %s, stopping", offset)
                    break

                accepted = self._collect_page(
                    scraper, fetcher, fragments, filters, now, listings, effective_limit
                )
                logger.info("Offset %s: %s fragments, %s accepted", offset, len(fragments), accepted)

                # Newest-first pages are chronological: one stale page means
                # every later page is stale too. Price ordering gives no such guarantee.
                if filters.time_window_active and filters.order == SortOrder.NEWEST and accepted == 0:
                    logger.info("Page at offset %s had nothing inside the time window, stopping", offset)
                    break

                offset += PAGE_SIZE
                if offset > total_for_paging or offset > MAX_OFFSET:
                    break
        except FetchError as e:
            raise ScrapeError(f"Failed to scrape Bazos: {e}") from e
        finally:
            close = getattr(fetcher, "close", None)
            if close:
                close()

        logger.info("Collected %s listings in %s requests", len(listings), fetcher.request_count)
        return SearchResult(listings=listings, total_found=total_found, total_returned=len(listings))

    def _collect_page(
        self,
        scraper: ListingSource,
        fetcher,
        fragments,
        filters: SearchFilters,
        now: datetime,
        listings: List[Listing],
        limit: int,
    ) -> int:
        accepted = 0
        for fragment in fragments:
            if len(listings) >= limit:
                break
            listing = scraper.parse_card(fragment, filters.published_days, now)
            if listing is None:
                continue
            if filters.with_full_descriptions:
                listing = scraper.enrich_with_details(fetcher, listing)
            listings.append(listing)
            accepted += 1
        return accepted

    def run_batch(
        self,
        items: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Scrapes each parameter record in order. With continue_on_fail a failing
        record yields {"error": message} instead of aborting the batch.
        """
        results = []
        for i, params in enumerate(items):
            try:
                filters = SearchFilters.from_params(params)
                output = self.search(filters, now=now)
                results.append(output.model_dump(by_alias=True, mode="json"))
            except Exception as e:
                if not continue_on_fail:
                    raise
                if isinstance(e, BazosScraperError):
                    logger.warning("Item %s failed: %s", i, e)
                else:
                    logger.exception("Item %s failed unexpectedly", i)
                results.append(ScrapeErrorItem(error=str(e)).model_dump())
        return results
