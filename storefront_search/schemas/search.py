from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProductSorting(str, Enum):
    RELEVANCE = "relevance"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    CREATED_ON = "created_on"


class SearchMode(str, Enum):
    INSTANT = "instant"
    FULL = "full"


# ============================================================================
# Queries
# ============================================================================


class CatalogSearchQuery(BaseModel):
    """Raw search request as sent by the client"""
    term: str | None = Field(default=None, description="Search term as typed by the user")
    fields: list[str] = Field(default_factory=list, description="Product fields to search in")
    offset: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=1)
    sort: ProductSorting | None = None
    language_code: str | None = Field(default=None, description="SEO code of the working language")
    category_id: int | None = Field(default=None, description="Restrict hits to this category")
    manufacturer_id: int | None = Field(default=None, description="Restrict hits to this manufacturer")


class Query(BaseModel):
    """Normalized query, ready for the search backend"""
    model_config = ConfigDict(frozen=True)

    term: str
    fields: tuple[str, ...] = Field(..., min_length=1)
    offset: int = 0
    limit: int
    sort: ProductSorting = ProductSorting.RELEVANCE
    language_code: str | None = None
    category_id: int | None = None
    manufacturer_id: int | None = None

    def with_term(self, term: str) -> "Query":
        return self.model_copy(update={"term": term})


class ValidationFailure(BaseModel):
    """Query was rejected before reaching the backend"""
    model_config = ConfigDict(frozen=True)

    reason: str = "term_too_short"
    min_length: int
    term: str = ""


# ============================================================================
# Backend results
# ============================================================================


class SearchHit(BaseModel):
    """Single backend record (product, category or manufacturer)"""
    entity_id: int
    fields: dict[str, Any] = Field(default_factory=dict)
    localized: dict[str, dict[str, str]] = Field(default_factory=dict)
    score: float = 0.0

    def get_field(self, name: str, language_code: str | None = None) -> str | None:
        """
        Look up a field value.

        With a language code only the localized values for that language are
        consulted, otherwise only the unlocalized ones. Blank values count as missing.
        """
        if language_code:
            value = self.localized.get(language_code, {}).get(name)
        else:
            value = self.fields.get(name)

        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None


class SearchResult(BaseModel):
    """Raw result of one backend search"""
    hits: list[SearchHit] = Field(default_factory=list)
    total_count: int = 0
    spell_checker_suggestions: list[str] = Field(default_factory=list)
    top_categories: list[SearchHit] = Field(default_factory=list)
    top_manufacturers: list[SearchHit] = Field(default_factory=list)


# ============================================================================
# Assembled outcome
# ============================================================================


class HitItem(BaseModel):
    label: str = ""
    url: str


class HitGroup(BaseModel):
    name: str
    display_name: str
    ordinal: int = 0  # Advisory, lower sorts first
    hits: list[HitItem] = Field(default_factory=list)


class SearchOutcome(BaseModel):
    """Final assembled result of a search request"""
    query: Query
    term: str
    attempted_term: str | None = None
    total_count: int = 0
    result: SearchResult = Field(default_factory=SearchResult)
    hit_groups: list[HitGroup] = Field(default_factory=list)
    retried: bool = False

    @property
    def hits(self) -> list[SearchHit]:
        return self.result.hits

    @property
    def language_code(self) -> str | None:
        return self.query.language_code


# ============================================================================
# API responses
# ============================================================================


class ProductSummary(BaseModel):
    id: int
    name: str
    short_description: str | None = None
    sku: str | None = None
    price: float | None = None


class SearchBoxModel(BaseModel):
    instant_search_enabled: bool
    show_product_images_in_instant_search: bool
    search_term_minimum_length: int
    current_query: str | None = None


class InstantSearchResponse(BaseModel):
    term: str
    total_products_count: int
    show_product_images: bool
    top_products: list[ProductSummary]
    hit_groups: list[HitGroup]


class SearchResponse(BaseModel):
    term: str | None
    attempted_term: str | None = None
    total_products_count: int = 0
    offset: int = 0
    limit: int | None = None
    sort: ProductSorting | None = None
    category_id: int | None = None
    manufacturer_id: int | None = None
    products: list[ProductSummary] = Field(default_factory=list)
    hit_groups: list[HitGroup] = Field(default_factory=list)
    error: str | None = None


class IndexStats(BaseModel):
    is_initialized: bool
    total_documents: int
    total_categories: int
    total_manufacturers: int
    vocabulary_size: int
