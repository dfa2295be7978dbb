"""
Product repository for data access layer following Repository pattern
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from nutrition_service.core.logger import logger
from nutrition_service.models.product import Product


class ProductRepository:
    """
    Raw data access for the products collection.

    Returns None for unknown or malformed ids. PyMongoError propagates to
    the service layer, which owns timeouts and error mapping.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def _to_object_id(product_id: str) -> Optional[ObjectId]:
        return ObjectId(product_id) if ObjectId.is_valid(product_id) else None

    @staticmethod
    def _doc_to_product(doc: Optional[dict]) -> Optional[Product]:
        """Convert MongoDB document to Product model"""
        if not doc:
            return None
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return Product.model_validate(doc)

    async def create(self, document: Dict[str, Any]) -> Product:
        doc = dict(document)
        result = await self.collection.insert_one(doc)
        logger.debug(
            "Inserted product document",
            metadata={"event": "product_inserted", "product_id": str(result.inserted_id)},
        )
        doc["_id"] = result.inserted_id
        return self._doc_to_product(doc)

    async def find_all(self) -> List[Product]:
        cursor = self.collection.find({})
        return [self._doc_to_product(doc) async for doc in cursor]

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        obj_id = self._to_object_id(product_id)
        if obj_id is None:
            return None
        doc = await self.collection.find_one({"_id": obj_id})
        return self._doc_to_product(doc)

    async def find_by_name(self, name: str) -> Optional[Product]:
        doc = await self.collection.find_one({"name": name})
        return self._doc_to_product(doc)

    async def update(self, product_id: str, changes: Dict[str, Any]) -> Optional[Product]:
        obj_id = self._to_object_id(product_id)
        if obj_id is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": obj_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_product(doc)

    async def delete(self, product_id: str) -> bool:
        obj_id = self._to_object_id(product_id)
        if obj_id is None:
            return False
        result = await self.collection.delete_one({"_id": obj_id})
        return result.deleted_count > 0

    async def ping(self) -> bool:
        await self.collection.database.command("ping")
        return True
