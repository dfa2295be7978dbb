"""
Product model as stored and returned by the service
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Order matters: create requests report the first missing field in this order
NUMERIC_FIELDS = (
    "weight",
    "calories",
    "fat",
    "proteins",
    "carbohydrate",
    "sugar",
    "sodium",
    "potassium",
)
REQUIRED_FIELDS = ("name",) + NUMERIC_FIELDS


class ProductBase(BaseModel):
    """Nutritional fields shared by every product representation"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    weight: float
    calories: float
    fat: float
    proteins: float
    carbohydrate: float
    sugar: float
    sodium: float
    potassium: float
    image_url: Optional[str] = Field(None, alias="imageUrl")


class Product(ProductBase):
    """Product model with ID for database operations"""
    id: str
