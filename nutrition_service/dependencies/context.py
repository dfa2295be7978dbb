"""
Service context: every collaborator a request handler needs, built once at
startup and stored on `app.state.context`. Tests build one from fakes.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from nutrition_service.clients.nutrient_lookup import NutrientLookupClient
from nutrition_service.clients.object_store import ObjectStoreGateway
from nutrition_service.core.config import Config
from nutrition_service.core.logger import logger
from nutrition_service.core.resilience import CallPolicy
from nutrition_service.db.indexes import create_indexes
from nutrition_service.db.mongodb import Database
from nutrition_service.repositories.product import ProductRepository
from nutrition_service.services.product import ProductService
from nutrition_service.services.uploads import UploadStager


@dataclass
class ServiceContext:
    config: Config
    product_service: ProductService
    object_store: ObjectStoreGateway
    nutrient_client: NutrientLookupClient
    upload_stager: UploadStager
    database: Optional[Database] = None
    http_client: Optional[httpx.AsyncClient] = None

    @classmethod
    async def create(cls, config: Config) -> "ServiceContext":
        """Connect to MongoDB and build the external clients from configuration"""
        database = Database(config)
        await database.connect()
        await create_indexes(database.product_collection())

        policy = CallPolicy.from_config(config)
        http_client = httpx.AsyncClient()
        context = cls(
            config=config,
            product_service=ProductService(
                ProductRepository(database.product_collection()), policy
            ),
            object_store=ObjectStoreGateway.from_config(config),
            nutrient_client=NutrientLookupClient.from_config(config, http_client),
            upload_stager=UploadStager(config.upload_dir, config.max_upload_bytes),
            database=database,
            http_client=http_client,
        )

        if not config.s3_bucket:
            logger.warning("S3_BUCKET is not set; image uploads will fail")
        if not config.nutrient_api_url:
            logger.warning("NUTRIENT_API_URL is not set; nutrient lookups will fail")
        return context

    async def close(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.database is not None:
            await self.database.close()


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context
