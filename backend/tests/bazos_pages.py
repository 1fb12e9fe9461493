"""
Captured Bazos markup, trimmed to what the scraper reads, plus a fake fetcher.
"""
from bazos_scraper.core.exceptions import FetchError


def listing_html(
    listing_id=171234567,
    title="Horský bicykel",
    date_text=" - [27.10. 2025]",
    description="Predám horský bicykel, veľkosť rámu L.",
    price="150 €",
    location="Bratislava<br>811 01",
    views="42 x",
    img_src=None,
    href=None,
):
    href = href or f"/inzerat/{listing_id}/horsky-bicykel.php"
    if img_src is None:
        img_src = f"https://www.bazos.sk/img/1t/{str(listing_id)[-3:]}/{listing_id}.jpg"
    return f"""
<div class="inzeraty inzeratyflex">
  <div class="inzeratynadpis">
    <a href="{href}"><img src="{img_src}" class="obrazek" alt="{title}" width="170" height="128"></a>
    <h2 class="nadpis"><a href="{href}">{title}</a></h2>
    <span class="velikost10">{date_text}</span>
    <br>
    <div class="popis">{description}</div>
  </div>
  <div class="inzeratycena"><b><span translate="no">{price}</span></b></div>
  <div class="inzeratylok">{location}</div>
  <div class="inzeratyview">{views}</div>
</div>
"""


def results_page(listings=(), total=None, country="sk"):
    """A search.php page; total=None leaves the results banner out."""
    banner = ""
    if total is not None:
        grouped = f"{total:,}".replace(",", " ")
        if country == "cz":
            banner = f'<div class="inzeratynadpis">Zobrazeno 1-20 inzerátů z {grouped}</div>'
        else:
            banner = f'<div class="inzeratynadpis">Zobrazených 1-20 inzerátov z {grouped}</div>'
    return f"""<!DOCTYPE html>
<html lang="sk">
<head><meta charset="utf-8"><title>Bazoš</title></head>
<body>
<div class="listainzerat inzeratyflex">{banner}</div>
{''.join(listings)}
</body>
</html>
"""


def detail_page(description="Predám horský bicykel, veľkosť rámu L. Málo jazdený, nové brzdy.",
                name="Peter", phone="0905 123 456", name_label="Meno:"):
    return f"""<!DOCTYPE html>
<html>
<body>
<div class="popisdetail">{description}</div>
<table>
  <tr><td class="listadvlevo">{name_label}</td><td><b>{name}</b></td></tr>
  <tr id="overlaytel"><td>Telefón:</td><td><a href="#" class="teldetail" rel="nofollow">{phone}</a></td></tr>
  <tr><td>Lokalita:</td><td>811 01 Bratislava</td></tr>
</table>
</body>
</html>
"""


class FakeFetcher:
    """
    Serves canned markup by URL and records every request.
    Values may be an exception instance to simulate a failing request.
    """

    def __init__(self, pages=None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls = []
        self.closed = False

    def fetch(self, url):
        self.calls.append(url)
        page = self.pages.get(url, self.default)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise FetchError(f"HTTP 404 for {url}", url=url, status_code=404)
        return page

    @property
    def request_count(self):
        return len(self.calls)

    def close(self):
        self.closed = True
