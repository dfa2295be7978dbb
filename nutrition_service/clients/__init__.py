"""
Clients Package
External service clients: object storage and nutrient lookup.
"""

from .nutrient_lookup import NutrientLookupClient, NutrientLookupResult
from .object_store import ObjectStoreGateway

__all__ = [
    "NutrientLookupClient",
    "NutrientLookupResult",
    "ObjectStoreGateway",
]
