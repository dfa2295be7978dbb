"""
API module initialization
"""

from . import operational, products

__all__ = ["operational", "products"]
