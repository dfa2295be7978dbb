"""
Dependencies module initialization
"""

from .auth import get_current_principal
from .context import ServiceContext, get_context
from .services import (
    get_nutrient_client,
    get_object_store,
    get_product_service,
    get_upload_stager,
)

__all__ = [
    "ServiceContext",
    "get_context",
    "get_current_principal",
    "get_nutrient_client",
    "get_object_store",
    "get_product_service",
    "get_upload_stager",
]
