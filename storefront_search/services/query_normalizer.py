"""Validation and rewriting of inbound search queries"""

import logging

from storefront_search.core.config import SearchConfig
from storefront_search.schemas.search import (
    CatalogSearchQuery,
    ProductSorting,
    Query,
    SearchMode,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

INSTANT_SEARCH_FIELDS = ("name", "shortdescription", "tagname")
INSTANT_SEARCH_MAX_PRODUCTS = 16


def normalize(
    raw_query: CatalogSearchQuery,
    mode: SearchMode,
    config: SearchConfig,
) -> Query | ValidationFailure:
    """
    Turn a raw client query into a canonical Query.

    Instant mode overrides fields, paging and sort with fixed values;
    full mode keeps what the caller asked for within the configured limits.

    Returns:
        Query, or ValidationFailure when the term is missing or too short
    """
    term = (raw_query.term or "").strip()
    if len(term) < config.search_term_min_length:
        logger.debug(f"Rejected search term {term!r} (min length {config.search_term_min_length})")
        return ValidationFailure(min_length=config.search_term_min_length, term=term)

    if mode is SearchMode.INSTANT:
        fields = list(INSTANT_SEARCH_FIELDS)
        if "sku" in config.search_fields:
            fields.append("sku")

        return Query(
            term=term,
            fields=tuple(fields),
            offset=0,
            limit=min(INSTANT_SEARCH_MAX_PRODUCTS, config.instant_search_number_of_products),
            sort=ProductSorting.RELEVANCE,
            language_code=raw_query.language_code,
        )

    fields = _dedupe(raw_query.fields) or list(config.search_fields)
    limit = raw_query.limit or config.default_page_size

    return Query(
        term=term,
        fields=tuple(fields),
        offset=raw_query.offset,
        limit=min(limit, config.max_page_size),
        sort=raw_query.sort or ProductSorting.RELEVANCE,
        language_code=raw_query.language_code,
        category_id=raw_query.category_id,
        manufacturer_id=raw_query.manufacturer_id,
    )


def _dedupe(fields: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for field in fields:
        field = field.strip().lower()
        if field:
            seen.setdefault(field, None)
    return list(seen)
