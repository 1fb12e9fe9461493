from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from bazos_scraper.core.config import (
    DEFAULT_DISTANCE_KM,
    DEFAULT_RESULTS_LIMIT,
    MAX_RESULTS_LIMIT,
)
from bazos_scraper.core.exceptions import InvalidSearchError


class Country(str, Enum):
    SK = "sk"
    CZ = "cz"


class SortOrder(str, Enum):
    NEWEST = "newest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"

    @property
    def query_token(self) -> str:
        """Value of the `order` query parameter on search.php."""
        return {"newest": "", "price-asc": "1", "price-desc": "2"}[self.value]


class SearchFilters(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    search: str = Field(..., min_length=1)
    location: str = ""
    distance: int = Field(DEFAULT_DISTANCE_KM, ge=0)
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    order: SortOrder = SortOrder.NEWEST
    results_limit: int = Field(DEFAULT_RESULTS_LIMIT, ge=1)
    published_days: Optional[int] = Field(None, ge=0)
    with_full_descriptions: bool = False
    country: Country = Country.SK

    @field_validator("search", "location", mode="before")
    @classmethod
    def _strip_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("min_price", "max_price", "published_days", mode="before")
    @classmethod
    def _empty_means_unset(cls, v: Any) -> Any:
        # The host runtime sends "" for untouched numeric inputs; 0 stays 0
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("order", mode="before")
    @classmethod
    def _legacy_order_tokens(cls, v: Any) -> Any:
        # Accept the raw search.php tokens as well ("", 1, 2)
        legacy = {"": SortOrder.NEWEST, "0": SortOrder.NEWEST, "1": SortOrder.PRICE_ASC, "2": SortOrder.PRICE_DESC}
        if v is None:
            return SortOrder.NEWEST
        if isinstance(v, (int, str)) and not isinstance(v, bool) and str(v).strip() in legacy:
            return legacy[str(v).strip()]
        return v

    @field_validator("results_limit")
    @classmethod
    def _cap_limit(cls, v: int) -> int:
        return min(v, MAX_RESULTS_LIMIT)

    @property
    def time_window_active(self) -> bool:
        return self.published_days is not None and self.published_days > 0

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchFilters":
        """Validate a raw parameter mapping, raising InvalidSearchError on failure."""
        try:
            return cls.model_validate(dict(params))
        except ValidationError as e:
            for err in e.errors():
                if err["loc"] and err["loc"][0] == "search":
                    raise InvalidSearchError("Search term is required") from e
            raise InvalidSearchError(_format_validation_error(e)) from e


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        field = ".".join(str(p) for p in err["loc"]) or "input"
        parts.append(f"{field}: {err['msg']}")
    return "Invalid search parameters: " + "; ".join(parts)


class Listing(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: int = 0
    title: str = ""
    link: str = ""
    img_link: str = ""
    image_order: int = 1
    added: str = ""
    description: str = ""
    # Detail page only
    full_description: str = ""
    name: str = ""
    phone: str = ""
    price: int = 0
    currency: str = ""
    location: str = ""
    post_code: str = ""
    views: int = 0


class SearchResult(BaseModel):
    listings: List[Listing] = []
    total_found: int = 0
    total_returned: int = 0


class ScrapeOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    search_term: str
    location: str
    distance: int
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    order: SortOrder
    results_limit: int
    published_days: Optional[int] = None
    with_full_descriptions: bool
    country: Country
    search_url: str
    listings: List[Listing]
    total_found: int
    total_returned: int


class ScrapeErrorItem(BaseModel):
    error: str
