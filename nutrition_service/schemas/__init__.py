"""
Schemas module initialization
"""

from .product import ProductCreate, ProductResponse, ProductUpdate, ProductWithNutrients

__all__ = [
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
    "ProductWithNutrients",
]
