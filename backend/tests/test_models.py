"""
Tests for search parameter validation and output serialisation.
"""
import pytest
from pydantic import ValidationError

from bazos_scraper.core.exceptions import InvalidSearchError
from bazos_scraper.models.listing import Country, Listing, SearchFilters, SortOrder


def test_defaults():
    filters = SearchFilters.from_params({"search": "notebook"})
    assert filters.location == ""
    assert filters.distance == 25
    assert filters.min_price is None and filters.max_price is None
    assert filters.order == SortOrder.NEWEST
    assert filters.results_limit == 100
    assert filters.published_days is None
    assert filters.with_full_descriptions is False
    assert filters.country == Country.SK
    assert not filters.time_window_active


@pytest.mark.parametrize("params", [{}, {"search": ""}, {"search": "   "}, {"search": None}])
def test_search_term_is_required(params):
    with pytest.raises(InvalidSearchError, match="Search term is required"):
        SearchFilters.from_params(params)


def test_empty_strings_mean_unset_but_zero_is_kept():
    filters = SearchFilters.from_params({"search": "kolo", "minPrice": "", "maxPrice": 0, "publishedDays": ""})
    assert filters.min_price is None
    assert filters.max_price == 0
    assert filters.published_days is None


def test_camel_and_snake_case_keys():
    camel = SearchFilters.from_params({
        "search": "kolo", "resultsLimit": "40", "publishedDays": "7",
        "withFullDescriptions": True, "country": "cz",
    })
    snake = SearchFilters.from_params({
        "search": "kolo", "results_limit": 40, "published_days": 7,
        "with_full_descriptions": True, "country": "cz",
    })
    assert camel == snake
    assert camel.results_limit == 40
    assert camel.time_window_active


def test_results_limit_is_capped():
    assert SearchFilters.from_params({"search": "kolo", "resultsLimit": 5000}).results_limit == 1000
    with pytest.raises(InvalidSearchError):
        SearchFilters.from_params({"search": "kolo", "resultsLimit": 0})


def test_order_accepts_site_tokens():
    assert SearchFilters.from_params({"search": "x", "order": ""}).order == SortOrder.NEWEST
    assert SearchFilters.from_params({"search": "x", "order": 1}).order == SortOrder.PRICE_ASC
    assert SearchFilters.from_params({"search": "x", "order": "2"}).order == SortOrder.PRICE_DESC
    assert SearchFilters.from_params({"search": "x", "order": "price-asc"}).order == SortOrder.PRICE_ASC
    assert SortOrder.NEWEST.query_token == ""
    assert SortOrder.PRICE_DESC.query_token == "2"


def test_invalid_values_are_reported():
    with pytest.raises(InvalidSearchError, match="country"):
        SearchFilters.from_params({"search": "x", "country": "pl"})
    with pytest.raises(InvalidSearchError, match="minPrice|min_price"):
        SearchFilters.from_params({"search": "x", "minPrice": -5})


def test_zero_day_window_is_inactive():
    assert not SearchFilters.from_params({"search": "x", "publishedDays": 0}).time_window_active


def test_filters_are_frozen():
    filters = SearchFilters(search="kolo")
    with pytest.raises(ValidationError):
        filters.search = "auto"


def test_listing_serialises_with_camel_case_keys():
    data = Listing(id=5, img_link="https://x/img/1/5.jpg", post_code="811 01").model_dump(by_alias=True)
    assert list(data) == [
        "id", "title", "link", "imgLink", "imageOrder", "added", "description",
        "fullDescription", "name", "phone", "price", "currency", "location", "postCode", "views",
    ]
    assert data["postCode"] == "811 01"
