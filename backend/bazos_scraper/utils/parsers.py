import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from bazos_scraper.scrapers.locales import FREE_TOKENS, locales_for

ABSOLUTE_DATE_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.\s*(\d{4})\b")
MIN_YEAR = 2000
MAX_YEAR = 2030


def parse_listing_date(text: str, country: str = "sk", now: Optional[datetime] = None) -> Optional[date]:
    """
    Parses the "added" text of a Bazos listing into a calendar date.
    Examples (now = 27.10.2025 14:00):
    - "[27.10. 2025]" -> 2025-10-27
    - "dnes" -> 2025-10-27
    - "včera" -> 2025-10-26
    - "pred 3 hodinami" -> 2025-10-27
    - "pred 3 dňami" -> 2025-10-24
    - "před 3 dny" -> 2025-10-24
    - "99.99.2025" -> None
    Returns None if unparseable.
    """
    if not text:
        return None
    now = now or datetime.now()
    today = now.date()

    m = ABSOLUTE_DATE_RE.search(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
        if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12 and 1 <= day <= 31):
            return None
        try:
            return date(year, month, day)
        except ValueError:
            # 30.2., 31.4. and friends
            return None

    locales = locales_for(country)

    if any(loc.today_token in text for loc in locales):
        return today
    if any(loc.yesterday_token in text for loc in locales):
        return today - timedelta(days=1)

    try:
        for loc in locales:
            hm = loc.hours_ago.search(text)
            if hm:
                return (now - timedelta(hours=int(hm.group(1)))).date()

        for loc in locales:
            dm = loc.days_ago.search(text)
            if dm:
                return today - timedelta(days=int(dm.group(1)))
    except OverflowError:
        # "pred 9999999 dňami" reaches before year 1
        return None

    return None


def published_cutoff(published_days: int, now: Optional[datetime] = None) -> date:
    """First day still inside an N-day window (today counts as day 0)."""
    now = now or datetime.now()
    try:
        return now.date() - timedelta(days=published_days)
    except OverflowError:
        return date.min


def date_in_window(listing_date: Optional[date], published_days: Optional[int], now: Optional[datetime] = None) -> bool:
    if not published_days or published_days <= 0:
        return True
    if listing_date is None:
        # Unknown dates are kept
        return True
    return listing_date >= published_cutoff(published_days, now)


def is_within_window(
    text: str,
    published_days: Optional[int],
    country: str = "sk",
    now: Optional[datetime] = None,
) -> bool:
    return date_in_window(parse_listing_date(text, country, now), published_days, now)


def degraded_date_text(text: str) -> str:
    return re.sub(r"[^\d.]", "", text or "")


def parse_price(price_text: str) -> Tuple[int, str]:
    """
    Parses Bazos price text into (price, currency).
    - "1 500 €" -> (1500, "€")
    - "Zadarmo" / "Zdarma" -> (0, "")
    - "Dohodou" -> (0, "Dohodou")
    """
    text = (price_text or "").strip()
    lowered = text.lower()
    if any(token in lowered for token in FREE_TOKENS):
        return 0, ""

    price = 0
    m = re.search(r"(\d+(?:[\s,]\d+)*)", text)
    if m:
        price = int(re.sub(r"[\s,]", "", m.group(1)))
    currency = re.sub(r"[\d\s,.\-]", "", text).strip()
    return price, currency


def parse_location(location_text: str) -> Tuple[str, str]:
    """Splits "Bratislava 811 01" into ("Bratislava", "811 01")."""
    text = location_text or ""
    m = re.search(r"(\d{3}\s\d{2})", text)
    post_code = m.group(1) if m else ""
    location = re.sub(r"[\d.]", "", text).strip()
    return location, post_code


def parse_first_int(text: str) -> int:
    m = re.search(r"(\d+)", text or "")
    return int(m.group(1)) if m else 0


def parse_total_results(banner_text: str) -> int:
    """"Zobrazených 1-20 inzerátov z 8 295" -> 8295; 0 when absent."""
    m = re.search(r"z\s+([\d\s]+)$", (banner_text or "").strip())
    if not m:
        return 0
    digits = re.sub(r"\s", "", m.group(1))
    return int(digits) if digits else 0
