"""
Product service containing business logic layer
"""

import asyncio
from typing import List, Optional

from pymongo.errors import AutoReconnect, PyMongoError

from nutrition_service.core.errors import NotFoundError, PersistenceError
from nutrition_service.core.logger import logger
from nutrition_service.core.resilience import CallPolicy
from nutrition_service.models.product import Product
from nutrition_service.repositories.product import ProductRepository
from nutrition_service.schemas.product import ProductCreate, ProductUpdate

# Reads are safe to replay after a dropped connection; writes are not
READ_RETRY_ON = (AutoReconnect,)


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, repository: ProductRepository, policy: CallPolicy = CallPolicy()):
        self.repository = repository
        self.policy = policy

    async def _call(self, operation: str, func, retry_on=()):
        try:
            return await self.policy.run(f"product.{operation}", func, retry_on=retry_on)
        except (PyMongoError, asyncio.TimeoutError) as e:
            raise PersistenceError(operation, detail=f"{type(e).__name__}: {e}") from e

    async def create(self, product_data: ProductCreate) -> Product:
        """Persist a new product and return it with its assigned id"""
        document = product_data.model_dump(by_alias=True)
        product = await self._call("create", lambda: self.repository.create(document))

        logger.info(
            f"Created product {product.id}",
            metadata={"event": "create_product", "product_id": product.id},
        )
        return product

    async def list(self) -> List[Product]:
        products = await self._call("list", self.repository.find_all, READ_RETRY_ON)
        logger.debug(
            f"Fetched {len(products)} products",
            metadata={"event": "list_products", "count": len(products)},
        )
        return products

    async def get_by_id(self, product_id: str) -> Product:
        """Get product by ID, raising NotFoundError when absent"""
        product = await self._call(
            "get_by_id", lambda: self.repository.find_by_id(product_id), READ_RETRY_ON
        )
        if not product:
            raise NotFoundError()
        return product

    async def get_by_name(self, name: str) -> Optional[Product]:
        return await self._call(
            "get_by_name", lambda: self.repository.find_by_name(name), READ_RETRY_ON
        )

    async def update(self, product_id: str, product_data: ProductUpdate) -> Product:
        """Apply a partial update, raising NotFoundError when the product is absent"""
        changes = product_data.changes()
        product = await self._call(
            "update", lambda: self.repository.update(product_id, changes)
        )
        if not product:
            raise NotFoundError()

        logger.info(
            f"Updated product {product_id}",
            metadata={"event": "update_product", "product_id": product_id,
                      "fields": sorted(changes)},
        )
        return product

    async def delete(self, product_id: str) -> None:
        deleted = await self._call("delete", lambda: self.repository.delete(product_id))
        if not deleted:
            raise NotFoundError()

        logger.info(
            f"Deleted product {product_id}",
            metadata={"event": "delete_product", "product_id": product_id},
        )

    async def ping(self) -> bool:
        return await self._call("ping", self.repository.ping)
