import re
import logging
from datetime import datetime
from typing import List, Optional, Tuple
from urllib.parse import quote

from bs4.element import Tag

from bazos_scraper.core.exceptions import FetchError
from bazos_scraper.models.listing import Country, Listing, SearchFilters
from bazos_scraper.scrapers.base import ListingSource
from bazos_scraper.scrapers.locales import get_locale
from bazos_scraper.utils.parsers import (
    degraded_date_text,
    is_within_window,
    parse_first_int,
    parse_listing_date,
    parse_location,
    parse_price,
    parse_total_results,
)

logger = logging.getLogger(__name__)

ELLIPSIS_MARKERS = ("...", "…")


def encode_uri_component(value) -> str:
    """Percent-encodes like JavaScript's encodeURIComponent."""
    return quote(str(value), safe="-_.!~*'()")


class BazosScraper(ListingSource):
    """
    Search result and detail page parser for bazos.sk / bazos.cz.

    Result page markup (one fragment per listing):

    <div class="inzeraty inzeratyflex">
      <div class="inzeratynadpis">
        <a href="/inzerat/123/kolo.php"><img src="https://www.bazos.sk/img/1t/123/123.jpg"></a>
        <h2 class="nadpis"><a href="/inzerat/123/kolo.php">Kolo</a></h2>
        <span class="velikost10"> - [27.10. 2025]</span>
        <div class="popis">Predám kolo...</div>
      </div>
      <div class="inzeratycena"><b>150 €</b></div>
      <div class="inzeratylok">Bratislava<br>811 01</div>
      <div class="inzeratyview">42 x</div>
    </div>
    """

    def __init__(self, country=Country.SK):
        self.country = Country(country)
        self.locale = get_locale(self.country)
        self.base_url = self.locale.base_url

    # -------------------------
    # URL building
    # -------------------------
    def build_url(self, filters: SearchFilters) -> str:
        # search.php is picky about parameter order, keep it as the site's own form emits it
        params = [
            f"hledat={encode_uri_component(filters.search)}",
            "rubriky=www",
            f"hlokalita={encode_uri_component(filters.location or '')}",
            f"humkreis={filters.distance}",
        ]
        if filters.min_price is not None:
            params.append(f"cenaod={filters.min_price}")
        if filters.max_price is not None:
            params.append(f"cenado={filters.max_price}")
        params += [
            f"Submit={encode_uri_component(self.locale.submit_label)}",
            f"order={filters.order.query_token}",
            "kitx=ano",
        ]
        return f"{self.base_url}/search.php?{'&'.join(params)}"

    def page_url(self, url: str, offset: int) -> str:
        return url if offset == 0 else f"{url}&crz={offset}"

    def to_absolute(self, url: str) -> str:
        if not url:
            return ""
        if url.startswith("http"):
            return url
        if url.startswith("//"):
            return "https:" + url
        if url.startswith("/"):
            return self.base_url + url
        return self.base_url + "/" + url

    # -------------------------
    # Result pages
    # -------------------------
    def parse_total_count(self, html: str) -> int:
        banner = self._soup(html).select_one("div.inzeratynadpis")
        if not banner:
            return 0
        return parse_total_results(banner.get_text())

    def parse_listing_fragments(self, html: str) -> List[Tag]:
        return self._soup(html).select("div.inzeraty.inzeratyflex")

    def parse_card(
        self,
        fragment: Tag,
        published_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Listing]:
        """Returns None for listings outside the time window or that fail to parse."""
        try:
            return self._parse_card(fragment, published_days, now)
        except Exception:
            logger.exception("Failed to parse listing fragment, skipping it")
            return None

    def _parse_card(self, fragment: Tag, published_days: Optional[int], now: Optional[datetime]) -> Optional[Listing]:
        img_node = fragment.select_one("a img")
        img_src = (img_node.get("src") or "") if img_node else ""
        listing_id = self._extract_id(img_src)

        added_text = self._added_text(fragment)
        if not is_within_window(added_text, published_days, self.country, now):
            logger.debug("Listing %s added %r is outside the %s day window", listing_id, added_text.strip(), published_days)
            return None

        added_date = parse_listing_date(added_text, self.country, now)
        title_node = fragment.select_one(".nadpis")
        link_node = fragment.select_one("h2 a")
        img_link, image_order = self._full_size_image(img_src)
        price, currency = parse_price(self._text(fragment, "div.inzeratycena"))
        location, post_code = parse_location(self._text(fragment, "div.inzeratylok", strip=False))

        return Listing(
            id=listing_id,
            title=title_node.get_text().strip() if title_node else "",
            link=self.to_absolute(link_node.get("href", "") if link_node else ""),
            img_link=img_link,
            image_order=image_order,
            added=added_date.isoformat() if added_date else degraded_date_text(added_text),
            description=self._text(fragment, "div.popis"),
            price=price,
            currency=currency,
            location=location,
            post_code=post_code,
            views=parse_first_int(self._text(fragment, "div.inzeratyview")),
        )

    @staticmethod
    def _added_text(fragment: Tag) -> str:
        date_span = fragment.select_one("span.velikost10")
        if date_span:
            return date_span.get_text()
        # The price sits in a span as well
        return "".join(
            span.get_text() for span in fragment.find_all("span") if not span.find_parent("div", class_="inzeratycena")
        )

    @staticmethod
    def _text(node: Tag, selector: str, strip: bool = True) -> str:
        found = node.select_one(selector)
        if not found:
            return ""
        text = found.get_text()
        return text.strip() if strip else text

    @staticmethod
    def _extract_id(img_src: str) -> int:
        if not img_src or img_src == "empty":
            return 0
        m = re.search(r"(\d+)\.", img_src)
        return int(m.group(1)) if m else 0

    def _full_size_image(self, img_src: str) -> Tuple[str, int]:
        """
        Thumbnails live under /<n>t/ where n is the position of the photo the
        seller picked as cover; the full-size file is under /<n>/.
        """
        if not img_src or img_src == "empty":
            return "", 1
        image_order = 1
        m = re.search(r"(\d+)t/", img_src)
        if m:
            image_order = int(m.group(1))
            img_src = img_src[: m.start()] + m.group(1) + "/" + img_src[m.end():]
        return self.to_absolute(img_src), image_order

    # -------------------------
    # Detail pages
    # -------------------------
    @staticmethod
    def is_truncated(description: str) -> bool:
        return (description or "").endswith(ELLIPSIS_MARKERS)

    def enrich_with_details(self, fetcher, listing: Listing) -> Listing:
        """Fills full_description/name/phone from the detail page of a truncated listing."""
        if not self.is_truncated(listing.description) or not listing.link:
            return listing
        try:
            html = fetcher.fetch(listing.link)
        except FetchError as e:
            logger.warning("Failed to fetch detail page %s: %s", listing.link, e)
            return listing
        try:
            details = self.extract_details(html)
        except Exception:
            logger.warning("Failed to parse detail page %s", listing.link, exc_info=True)
            return listing
        return listing.model_copy(update=details)

    def extract_details(self, html: str) -> dict:
        soup = self._soup(html)
        details = {}

        desc_node = soup.select_one("div.popisdetail")
        if desc_node:
            details["full_description"] = desc_node.get_text().strip()

        for td in soup.find_all("td"):
            if td.get_text().strip() != self.locale.name_label:
                continue
            row = td.find_parent("tr")
            name_node = row.find("b") if row else None
            if name_node:
                details["name"] = name_node.get_text().strip()
            break

        phone_node = soup.select_one("tr#overlaytel a.teldetail")
        if phone_node:
            details["phone"] = phone_node.get_text().strip()

        return details
