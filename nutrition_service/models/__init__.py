"""
Models module initialization
"""

from .principal import Principal
from .product import NUMERIC_FIELDS, REQUIRED_FIELDS, Product, ProductBase

__all__ = [
    "NUMERIC_FIELDS",
    "REQUIRED_FIELDS",
    "Principal",
    "Product",
    "ProductBase",
]
