import logging
from typing import Optional

import requests

from bazos_scraper.core.config import settings
from bazos_scraper.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class HttpFetcher:
    """
    Plain HTTP client for Bazos pages.
    One requests.Session per scrape, a fixed desktop User-Agent and no retries:
    a failed request raises FetchError and the caller decides what it means.
    """

    def __init__(self, user_agent: Optional[str] = None, timeout: Optional[float] = None):
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent or settings.USER_AGENT})
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.request_count = 0

    def fetch(self, url: str) -> str:
        self.request_count += 1
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(f"HTTP {status} for {url}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise FetchError(f"{type(e).__name__}: {e}", url=url) from e

        # Bazos serves UTF-8; requests assumes latin-1 when the charset is missing
        if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
            resp.encoding = "utf-8"
        return resp.text

    def close(self):
        if self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
