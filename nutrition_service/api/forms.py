"""
Multipart form handling for product create/update requests.

`read_product_form` accepts at most one image file in the `images` field
and rejects anything else before a handler looks at the text fields.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from fastapi import Depends, Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from nutrition_service.core.errors import ValidationError
from nutrition_service.core.logger import logger
from nutrition_service.dependencies.context import ServiceContext, get_context
from nutrition_service.models.product import NUMERIC_FIELDS, REQUIRED_FIELDS

IMAGE_FIELD = "images"


@dataclass
class ProductForm:
    """Text fields (raw strings, only those that were sent) and the optional image"""
    fields: Dict[str, str] = field(default_factory=dict)
    image: Optional[UploadFile] = None

    def first_missing(self, names: Sequence[str] = REQUIRED_FIELDS) -> Optional[str]:
        for name in names:
            if not self.fields.get(name):
                return name
        return None

    def provided(self) -> Dict[str, str]:
        """Known product fields that were sent with a non-empty value"""
        return {name: value for name, value in self.fields.items()
                if name in REQUIRED_FIELDS and value}


def parse_number(name: str, raw: str) -> float:
    """Parse a numeric product field; must be a finite, non-negative number"""
    try:
        value = float(raw.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid value for {name}", field=name)
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"Invalid value for {name}", field=name)
    return value


def parse_product_fields(raw: Dict[str, str]) -> dict:
    """Convert raw form strings to typed values; name stays a string"""
    values = {}
    for name, value in raw.items():
        if name in NUMERIC_FIELDS:
            values[name] = parse_number(name, value)
        else:
            values[name] = value
    return values


async def read_product_form(
    request: Request,
    context: ServiceContext = Depends(get_context),
) -> ProductForm:
    """Read the multipart body; any failure is a ValidationError (400)"""
    config = context.config
    try:
        form = await request.form()
    except (MultiPartException, HTTPException) as e:
        logger.warning("Unreadable multipart body", error=e)
        raise ValidationError("Malformed multipart request body")

    product_form = ProductForm()
    images = []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                continue
            if key != IMAGE_FIELD:
                raise ValidationError("Unexpected field", field=key)
            images.append(value)
        else:
            product_form.fields[key] = value

    if len(images) > 1:
        raise ValidationError("Only one image may be uploaded", field=IMAGE_FIELD)

    if images:
        image = images[0]
        if image.content_type not in config.allowed_image_types:
            raise ValidationError("Only image files are allowed", field=IMAGE_FIELD)
        if image.size is not None and image.size > config.max_upload_bytes:
            raise ValidationError("File too large", field=IMAGE_FIELD)
        product_form.image = image

    logger.debug(
        "Received product form",
        metadata={"fields": sorted(product_form.fields),
                  "image": product_form.image.filename if product_form.image else None},
    )
    return product_form
