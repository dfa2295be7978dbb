"""
Services module initialization
"""

from .product import ProductService
from .uploads import StagedUpload, UploadStager

__all__ = [
    "ProductService",
    "StagedUpload",
    "UploadStager",
]
