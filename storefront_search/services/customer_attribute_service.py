from datetime import UTC, datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront_search.core.config import settings

LAST_CONTINUE_SHOPPING_PAGE = "LastContinueShoppingPage"


class CustomerAttributeService:
    """Generic key/value attributes attached to a customer and store."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.GENERIC_ATTRIBUTES_COLLECTION]

    async def save_attribute(self, customer_id: str, key: str, value: str, store_id: int) -> None:
        """Insert or overwrite an attribute."""
        await self.collection.update_one(
            {"customer_id": customer_id, "key": key, "store_id": store_id},
            {"$set": {"value": value, "updated_at": datetime.now(UTC)}},
            upsert=True,
        )

    async def get_attribute(self, customer_id: str, key: str, store_id: int) -> str | None:
        """Retrieve an attribute value."""
        document: dict[str, Any] | None = await self.collection.find_one(
            {"customer_id": customer_id, "key": key, "store_id": store_id}
        )
        return document["value"] if document else None

    async def record_last_visited_page(self, customer_id: str, url: str, store_id: int) -> None:
        """Remember the page a 'continue shopping' link should lead back to."""
        await self.save_attribute(customer_id, LAST_CONTINUE_SHOPPING_PAGE, url, store_id)
