"""
Scan Bazos - single search job

Runs one search against bazos.sk / bazos.cz and prints the result JSON
(or writes it to --output).

Usage:
    python -m bazos_scraper.jobs.scan_bazos notebook --days 7
    python -m bazos_scraper.jobs.scan_bazos "horský bicykel" --location 81101 --distance 50 --max-price 300
    python -m bazos_scraper.jobs.scan_bazos kolo --country cz --order price-asc --limit 40 --full

Exit Codes:
    0 = Success
    1 = Scrape failed (a result page could not be fetched)
    2 = Invalid search parameters
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from bazos_scraper.core.config import DEFAULT_DISTANCE_KM, DEFAULT_RESULTS_LIMIT, MAX_RESULTS_LIMIT
from bazos_scraper.core.exceptions import InvalidSearchError, ScrapeError
from bazos_scraper.core.logging import configure_logging
from bazos_scraper.models.listing import Country, SearchFilters, SortOrder
from bazos_scraper.services.search_service import SearchService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scan Bazos - scrape one search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m bazos_scraper.jobs.scan_bazos notebook
    python -m bazos_scraper.jobs.scan_bazos darujem --min-price 0 --max-price 0 --days 3
    python -m bazos_scraper.jobs.scan_bazos auto --country cz --output auta.json
        """
    )
    parser.add_argument("search", help="Search term")
    parser.add_argument("--location", default="", help="Post code (default: whole country)")
    parser.add_argument(
        "--distance",
        type=int,
        default=DEFAULT_DISTANCE_KM,
        help=f"Radius around the post code in km (default: {DEFAULT_DISTANCE_KM})"
    )
    parser.add_argument("--min-price", type=int, default=None, help="Minimum price (0 is a valid filter)")
    parser.add_argument("--max-price", type=int, default=None, help="Maximum price (0 is a valid filter)")
    parser.add_argument(
        "--order",
        choices=[o.value for o in SortOrder],
        default=SortOrder.NEWEST.value,
        help="Sort order (default: newest)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_RESULTS_LIMIT,
        help=f"Maximum listings to return, capped at {MAX_RESULTS_LIMIT} (default: {DEFAULT_RESULTS_LIMIT})"
    )
    parser.add_argument("--days", type=int, default=None, help="Only listings added in the last N days")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Fetch detail pages of truncated listings for full description, name and phone"
    )
    parser.add_argument(
        "--country",
        choices=[c.value for c in Country],
        default=Country.SK.value,
        help="Bazos domain (default: sk)"
    )
    parser.add_argument("--output", type=str, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: BAZOS_LOG_LEVEL or INFO)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        filters = SearchFilters.from_params({
            "search": args.search,
            "location": args.location,
            "distance": args.distance,
            "min_price": args.min_price,
            "max_price": args.max_price,
            "order": args.order,
            "results_limit": args.limit,
            "published_days": args.days,
            "with_full_descriptions": args.full,
            "country": args.country,
        })
    except InvalidSearchError as e:
        logger.error("%s", e)
        return 2

    try:
        output = SearchService().search(filters)
    except ScrapeError as e:
        logger.error("%s", e)
        return 1

    payload = json.dumps(output.model_dump(by_alias=True, mode="json"), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        logger.info("Saved %s listings to %s", output.total_returned, args.output)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
