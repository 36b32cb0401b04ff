from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront_search.core.config import settings


class CatalogService:
    """Reads the catalog documents the search index is built from."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.products_collection = db[settings.PRODUCTS_COLLECTION]
        self.categories_collection = db[settings.CATEGORIES_COLLECTION]
        self.manufacturers_collection = db[settings.MANUFACTURERS_COLLECTION]

    async def get_published_products(self) -> list[dict[str, Any]]:
        """Get all products that are visible in the storefront."""
        cursor = self.products_collection.find(
            {"published": {"$ne": False}, "deleted": {"$ne": True}},
            {"_id": 0},
        ).sort("id", 1)
        return await cursor.to_list(length=None)

    async def get_categories(self) -> list[dict[str, Any]]:
        """Get all published categories."""
        cursor = self.categories_collection.find({"published": {"$ne": False}}, {"_id": 0, "id": 1, "name": 1, "localized": 1})
        return await cursor.to_list(length=None)

    async def get_manufacturers(self) -> list[dict[str, Any]]:
        """Get all published manufacturers."""
        cursor = self.manufacturers_collection.find({"published": {"$ne": False}}, {"_id": 0, "id": 1, "name": 1, "localized": 1})
        return await cursor.to_list(length=None)
