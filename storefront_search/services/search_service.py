"""Search service: instant and full catalog search for the storefront"""

import asyncio
import logging
from functools import lru_cache
from typing import Any

from storefront_search.core.config import SearchConfig, get_search_config, settings
from storefront_search.core.mongo import get_mongo_db
from storefront_search.schemas.search import (
    CatalogSearchQuery,
    InstantSearchResponse,
    ProductSummary,
    SearchBoxModel,
    SearchHit,
    SearchMode,
    SearchOutcome,
    SearchResponse,
    ValidationFailure,
)
from storefront_search.services.catalog_search_service import CatalogSearchService, get_catalog_search_service
from storefront_search.services.catalog_service import CatalogService
from storefront_search.services.customer_attribute_service import CustomerAttributeService
from storefront_search.services.hit_group_assembler import HitGroupAssembler
from storefront_search.services.label_resolver import resolve_label
from storefront_search.services.link_builder import get_link_builder
from storefront_search.services.localization import Translator, get_translator
from storefront_search.services.query_normalizer import normalize
from storefront_search.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger(__name__)


class SearchService:
    """
    Handles storefront search requests.

    Two modes:
    1. Instant search: compact preview while the user types. Fixed fields,
       at most 16 products, relevance order, no spell correction retry.
       A too short term yields no response at all.
    2. Full search: the search results page. Caller paging and sorting,
       remembers the page for 'continue shopping', retries once with the
       first spell checker suggestion when nothing was found.
       A too short term yields a response carrying an error message.

    The catalog index is built lazily from MongoDB on the first search.
    """

    def __init__(
        self,
        catalog_search: CatalogSearchService,
        translator: Translator,
        orchestrator: SearchOrchestrator,
        config: SearchConfig,
        catalog_service: CatalogService | None = None,
        attribute_service: CustomerAttributeService | None = None,
    ):
        self.catalog_search = catalog_search
        self.translator = translator
        self.orchestrator = orchestrator
        self.config = config
        self.catalog_service = catalog_service
        self.attribute_service = attribute_service
        self._index_lock = asyncio.Lock()

    async def ensure_index(self) -> None:
        """Ensure the catalog index is built (lazy initialization)"""
        if self.catalog_search.is_initialized:
            return

        async with self._index_lock:
            # Another request may have built it while we waited
            if not self.catalog_search.is_initialized:
                logger.info("🔄 Initializing catalog index (first search)...")
                await self._load_and_build()

    async def rebuild_index(self) -> dict[str, Any]:
        """Reload the catalog from MongoDB and rebuild the index"""
        async with self._index_lock:
            await self._load_and_build()
        return self.catalog_search.get_stats()

    async def _load_and_build(self) -> None:
        if self.catalog_service is None:
            raise RuntimeError("No catalog source configured")

        products = await self.catalog_service.get_published_products()
        categories = await self.catalog_service.get_categories()
        manufacturers = await self.catalog_service.get_manufacturers()
        self.catalog_search.build_index(products, categories, manufacturers)

    def get_search_box_model(self, current_query: str | None = None) -> SearchBoxModel:
        return SearchBoxModel(
            instant_search_enabled=self.config.instant_search_enabled,
            show_product_images_in_instant_search=self.config.show_product_images_in_instant_search,
            search_term_minimum_length=self.config.search_term_min_length,
            current_query=current_query,
        )

    async def instant_search(self, raw_query: CatalogSearchQuery) -> InstantSearchResponse | None:
        """
        Execute an instant search.

        Returns:
            InstantSearchResponse, or None when the term is too short
        """
        query = normalize(raw_query, SearchMode.INSTANT, self.config)
        if isinstance(query, ValidationFailure):
            return None

        await self.ensure_index()
        outcome = self.orchestrator.assemble(self.orchestrator.execute(query, SearchMode.INSTANT))

        logger.info(f"⚡ Instant search '{outcome.term}': {outcome.total_count} products")

        return InstantSearchResponse(
            term=outcome.term,
            total_products_count=outcome.total_count,
            show_product_images=self.config.show_product_images_in_instant_search,
            top_products=self._map_products(outcome),
            hit_groups=outcome.hit_groups,
        )

    async def search(
        self,
        raw_query: CatalogSearchQuery,
        customer_id: str | None = None,
        page_url: str | None = None,
        store_id: int | None = None,
    ) -> SearchResponse:
        """
        Execute a full search.

        Search Flow:
        1. Normalize the query; a too short term ends here with an error message
        2. Remember the current page as the customer's 'continue shopping' page
        3. Search, retrying once with the first spell checker suggestion
        4. Assemble hit groups and map product hits
        """
        query = normalize(raw_query, SearchMode.FULL, self.config)
        if isinstance(query, ValidationFailure):
            return SearchResponse(
                term=raw_query.term,
                offset=raw_query.offset,
                limit=raw_query.limit,
                sort=raw_query.sort,
                category_id=raw_query.category_id,
                manufacturer_id=raw_query.manufacturer_id,
                error=self.translator.translate(
                    "Search.SearchTermMinimumLengthIsNCharacters",
                    query.min_length,
                    language_code=raw_query.language_code,
                ),
            )

        await self._record_last_visited_page(customer_id, page_url, store_id)

        await self.ensure_index()
        outcome = self.orchestrator.assemble(self.orchestrator.execute(query, SearchMode.FULL))

        logger.info(
            f"🔍 Search '{outcome.term}': {outcome.total_count} products"
            + (f" (attempted '{outcome.attempted_term}')" if outcome.attempted_term else "")
        )

        return SearchResponse(
            term=outcome.term,
            attempted_term=outcome.attempted_term,
            total_products_count=outcome.total_count,
            offset=outcome.query.offset,
            limit=outcome.query.limit,
            sort=outcome.query.sort,
            category_id=outcome.query.category_id,
            manufacturer_id=outcome.query.manufacturer_id,
            products=self._map_products(outcome),
            hit_groups=outcome.hit_groups,
        )

    async def _record_last_visited_page(self, customer_id: str | None, page_url: str | None, store_id: int | None) -> None:
        if self.attribute_service is None or not customer_id or not page_url:
            return

        try:
            await self.attribute_service.record_last_visited_page(
                customer_id, page_url, store_id if store_id is not None else settings.STORE_ID
            )
        except Exception as e:
            logger.warning(f"Could not record last visited page for customer {customer_id}: {e}")

    def _map_products(self, outcome: SearchOutcome) -> list[ProductSummary]:
        return [self._map_product(hit, outcome.language_code) for hit in outcome.hits]

    @staticmethod
    def _map_product(hit: SearchHit, language_code: str | None) -> ProductSummary:
        price = hit.fields.get("price")
        return ProductSummary(
            id=hit.entity_id,
            name=resolve_label(hit, language_code),
            short_description=resolve_label(hit, language_code, field="shortdescription") or None,
            sku=hit.get_field("sku"),
            price=float(price) if price is not None else None,
        )

    def get_health_status(self) -> dict[str, Any]:
        """Get search service health status"""
        stats = self.catalog_search.get_stats()
        return {
            "status": "healthy" if stats["is_initialized"] else "initializing",
            "products_count": stats["total_documents"],
        }


@lru_cache
def get_search_service() -> SearchService:
    """Get cached search service instance"""
    db = get_mongo_db()
    catalog_search = get_catalog_search_service()
    translator = get_translator()
    config = get_search_config()
    assembler = HitGroupAssembler(translator=translator, link_builder=get_link_builder())

    return SearchService(
        catalog_search=catalog_search,
        translator=translator,
        orchestrator=SearchOrchestrator(search=catalog_search.search, assembler=assembler, config=config),
        config=config,
        catalog_service=CatalogService(db),
        attribute_service=CustomerAttributeService(db),
    )
