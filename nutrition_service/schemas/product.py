"""
API schemas for Product endpoints
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from nutrition_service.models.product import Product


class ProductCreate(BaseModel):
    """Schema for creating a new product"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0, allow_inf_nan=False)
    calories: float = Field(..., ge=0, allow_inf_nan=False)
    fat: float = Field(..., ge=0, allow_inf_nan=False)
    proteins: float = Field(..., ge=0, allow_inf_nan=False)
    carbohydrate: float = Field(..., ge=0, allow_inf_nan=False)
    sugar: float = Field(..., ge=0, allow_inf_nan=False)
    sodium: float = Field(..., ge=0, allow_inf_nan=False)
    potassium: float = Field(..., ge=0, allow_inf_nan=False)
    image_url: Optional[str] = Field(None, alias="imageUrl")


class ProductUpdate(BaseModel):
    """
    Schema for a partial update. Only fields that were explicitly set are
    written; use model_dump(exclude_unset=True).
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    weight: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    calories: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    fat: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    proteins: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    carbohydrate: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    sugar: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    sodium: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    potassium: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    def changes(self) -> dict:
        """Fields to persist, keyed by their stored (aliased) names"""
        return self.model_dump(exclude_unset=True, by_alias=True)


class ProductResponse(Product):
    """Schema for product responses"""


class ProductWithNutrients(Product):
    """Product enriched with the nutrient lookup result"""
    result: Any = None
