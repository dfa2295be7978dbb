"""
Service layer dependency injection for FastAPI.
"""

from fastapi import Depends

from nutrition_service.clients.nutrient_lookup import NutrientLookupClient
from nutrition_service.clients.object_store import ObjectStoreGateway
from nutrition_service.dependencies.context import ServiceContext, get_context
from nutrition_service.services.product import ProductService
from nutrition_service.services.uploads import UploadStager


def get_product_service(context: ServiceContext = Depends(get_context)) -> ProductService:
    return context.product_service


def get_object_store(context: ServiceContext = Depends(get_context)) -> ObjectStoreGateway:
    return context.object_store


def get_nutrient_client(context: ServiceContext = Depends(get_context)) -> NutrientLookupClient:
    return context.nutrient_client


def get_upload_stager(context: ServiceContext = Depends(get_context)) -> UploadStager:
    return context.upload_stager
