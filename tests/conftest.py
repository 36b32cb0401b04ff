"""Pytest configuration and fixtures for storefront search.

HTTP tests run against storefront_search.main:app through ASGI with the
search service dependency overridden, so no MongoDB is needed.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from storefront_search.core.config import SearchConfig
from storefront_search.main import app
from storefront_search.services.catalog_search_service import CatalogSearchService
from storefront_search.services.hit_group_assembler import HitGroupAssembler
from storefront_search.services.link_builder import LinkBuilder
from storefront_search.services.localization import Translator
from storefront_search.services.search_orchestrator import SearchOrchestrator
from storefront_search.services.search_service import SearchService, get_search_service

PRODUCTS = [
    {
        "id": 1,
        "name": "Running Shoes",
        "shortdescription": "Lightweight running shoes",
        "tags": ["sport", "running"],
        "sku": "RS-100",
        "price": 89.9,
        "created_on": "2024-03-01",
        "category_ids": [10],
        "manufacturer_ids": [20],
        "localized": {"de": {"name": "Laufschuhe"}},
    },
    {
        "id": 2,
        "name": "Leather Shoes",
        "shortdescription": "Classic leather shoes",
        "tags": ["formal"],
        "sku": "LS-200",
        "price": 129.0,
        "created_on": "2024-05-01",
        "category_ids": [11],
        "manufacturer_ids": [21],
    },
    {
        "id": 3,
        "name": "Tennis Racket",
        "shortdescription": "Carbon racket",
        "tags": ["sport", "tennis"],
        "sku": "TR-300",
        "price": 59.0,
        "created_on": "2023-11-15",
        "category_ids": [12],
        "manufacturer_ids": [20],
    },
    {
        "id": 4,
        "name": "Shoe Polish",
        "shortdescription": "Black polish for leather",
        "tags": ["care"],
        "sku": "SP-400",
        "price": 7.5,
        "created_on": "2024-01-10",
        "category_ids": [11],
        "manufacturer_ids": [22],
    },
]

CATEGORIES = [
    {"id": 10, "name": "Sport Shoes", "localized": {"de": {"name": "Sportschuhe"}}},
    {"id": 11, "name": "Formal"},
    {"id": 12, "name": "Rackets"},
]

MANUFACTURERS = [
    {"id": 20, "name": "Acme"},
    {"id": 21, "name": "Oxford & Co"},
    {"id": 22, "name": "Shiny", "localized": {"de": {"name": ""}}},
]


@pytest.fixture
def search_config() -> SearchConfig:
    return SearchConfig()


@pytest.fixture
def catalog_search() -> CatalogSearchService:
    """Catalog index over the sample products."""
    service = CatalogSearchService()
    service.build_index(PRODUCTS, CATEGORIES, MANUFACTURERS)
    return service


@pytest.fixture
def translator() -> Translator:
    return Translator()


@pytest.fixture
def link_builder() -> LinkBuilder:
    return LinkBuilder(prefix="/api/v1")


@pytest.fixture
def assembler(translator, link_builder) -> HitGroupAssembler:
    return HitGroupAssembler(translator=translator, link_builder=link_builder)


@pytest.fixture
def catalog_service():
    """Mock catalog source returning the sample catalog."""
    source = AsyncMock()
    source.get_published_products = AsyncMock(return_value=PRODUCTS)
    source.get_categories = AsyncMock(return_value=CATEGORIES)
    source.get_manufacturers = AsyncMock(return_value=MANUFACTURERS)
    return source


@pytest.fixture
def attribute_service():
    """Mock customer attribute service."""
    return AsyncMock()


@pytest.fixture
def search_service(catalog_search, translator, assembler, search_config, catalog_service, attribute_service) -> SearchService:
    return SearchService(
        catalog_search=catalog_search,
        translator=translator,
        orchestrator=SearchOrchestrator(search=catalog_search.search, assembler=assembler, config=search_config),
        config=search_config,
        catalog_service=catalog_service,
        attribute_service=attribute_service,
    )


@pytest.fixture
async def client(search_service) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.dependency_overrides[get_search_service] = lambda: search_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
