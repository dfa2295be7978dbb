"""
Product API endpoints

Each handler converts every failure into an `{"error": message}` response
with a status fixed per endpoint; see `endpoint_error`.
"""

from typing import List
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Response, status

from nutrition_service.api.forms import ProductForm, parse_product_fields, read_product_form
from nutrition_service.clients.nutrient_lookup import NutrientLookupClient
from nutrition_service.clients.object_store import ObjectStoreGateway
from nutrition_service.core.errors import (
    ErrorResponse,
    ErrorResponseModel,
    NotFoundError,
    ValidationError,
    endpoint_error,
)
from nutrition_service.core.logger import logger
from nutrition_service.dependencies.auth import get_current_principal
from nutrition_service.dependencies.services import (
    get_nutrient_client,
    get_object_store,
    get_product_service,
    get_upload_stager,
)
from nutrition_service.models.principal import Principal
from nutrition_service.schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    ProductWithNutrients,
)
from nutrition_service.services.product import ProductService
from nutrition_service.services.uploads import UploadStager

router = APIRouter()


async def _discard_image(object_store: ObjectStoreGateway, image_url: str) -> None:
    """Remove an image whose product was never stored; failure is only logged"""
    try:
        await object_store.delete(image_url)
    except ErrorResponse as e:
        logger.warning(
            f"Could not remove orphaned image {image_url}",
            error=e,
            metadata={"event": "orphaned_image", "image_url": image_url,
                      "detail": getattr(e, "detail", None)},
        )


@router.post(
    "",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponseModel},
        401: {"model": ErrorResponseModel},
        403: {"model": ErrorResponseModel},
        500: {"model": ErrorResponseModel},
    },
)
async def create_product(
    principal: Principal = Depends(get_current_principal),
    form: ProductForm = Depends(read_product_form),
    service: ProductService = Depends(get_product_service),
    object_store: ObjectStoreGateway = Depends(get_object_store),
    stager: UploadStager = Depends(get_upload_stager),
):
    """
    Create a product from a multipart form: one `images` file plus
    name, weight, calories, fat, proteins, carbohydrate, sugar, sodium and potassium.
    """
    missing = form.first_missing()
    if missing:
        raise ValidationError(f"Please provide {missing}", field=missing)
    if form.image is None:
        raise ValidationError("Please provide an image", field="images")

    product_data = ProductCreate(**parse_product_fields(form.provided()))

    image_url = None
    try:
        async with stager.stage(form.image) as staged:
            image_url = await object_store.upload(
                staged.path, staged.filename, staged.content_type
            )
            product = await service.create(
                product_data.model_copy(update={"image_url": image_url})
            )
    except Exception as e:
        if image_url:
            await _discard_image(object_store, image_url)
        raise endpoint_error(e, status.HTTP_500_INTERNAL_SERVER_ERROR, "create_product")

    logger.info(
        f"Product created: {product.id}",
        user_id=principal.subject,
        metadata={"event": "product_created", "product_id": product.id},
    )
    return product


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={500: {"model": ErrorResponseModel}},
)
async def list_products(service: ProductService = Depends(get_product_service)):
    """List every product"""
    try:
        return await service.list()
    except Exception as e:
        raise endpoint_error(e, status.HTTP_500_INTERNAL_SERVER_ERROR, "list_products")


@router.get(
    "/name/{name:path}",
    response_model=ProductWithNutrients,
    response_model_exclude_unset=True,
    responses={404: {"model": ErrorResponseModel}, 500: {"model": ErrorResponseModel}},
)
async def get_product_by_name(
    name: str,
    service: ProductService = Depends(get_product_service),
    nutrient_client: NutrientLookupClient = Depends(get_nutrient_client),
):
    """
    Get a product by its exact name, enriched with the nutrient lookup
    `result` computed from its fat, sugar and sodium values.
    """
    name = unquote(name)
    try:
        product = await service.get_by_name(name)
    except Exception as e:
        raise endpoint_error(e, status.HTTP_500_INTERNAL_SERVER_ERROR, "get_product_by_name")

    if not product:
        raise NotFoundError()

    try:
        lookup = await nutrient_client.lookup(product.fat, product.sugar, product.sodium)
    except Exception as e:
        raise endpoint_error(e, status.HTTP_500_INTERNAL_SERVER_ERROR, "get_product_by_name")

    # `result` stays out of the body when the lookup response had none
    extra = {"result": lookup.result} if "result" in lookup.model_fields_set else {}
    return ProductWithNutrients(**product.model_dump(), **extra)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Get a product by ID"""
    try:
        return await service.get_by_id(product_id)
    except Exception as e:
        raise endpoint_error(e, status.HTTP_404_NOT_FOUND, "get_product")


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponseModel},
        401: {"model": ErrorResponseModel},
        403: {"model": ErrorResponseModel},
    },
)
async def update_product(
    product_id: str,
    principal: Principal = Depends(get_current_principal),
    form: ProductForm = Depends(read_product_form),
    service: ProductService = Depends(get_product_service),
    object_store: ObjectStoreGateway = Depends(get_object_store),
    stager: UploadStager = Depends(get_upload_stager),
):
    """
    Partially update a product. Only the fields sent are changed; a new
    `images` file replaces the image URL.
    """
    try:
        values = parse_product_fields(form.provided())
        if not values and form.image is None:
            raise ValidationError("Please provide at least one field to update")

        if form.image is not None:
            async with stager.stage(form.image) as staged:
                values["image_url"] = await object_store.upload(
                    staged.path, staged.filename, staged.content_type
                )

        product = await service.update(product_id, ProductUpdate(**values))
    except Exception as e:
        raise endpoint_error(e, status.HTTP_400_BAD_REQUEST, "update_product")

    logger.info(
        f"Product updated: {product_id}",
        user_id=principal.subject,
        metadata={"event": "product_updated", "product_id": product_id},
    )
    return product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"model": ErrorResponseModel},
        401: {"model": ErrorResponseModel},
        403: {"model": ErrorResponseModel},
    },
)
async def delete_product(
    product_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ProductService = Depends(get_product_service),
    object_store: ObjectStoreGateway = Depends(get_object_store),
):
    """Delete a product and, first, its stored image"""
    try:
        product = await service.get_by_id(product_id)
        if product.image_url:
            await object_store.delete(product.image_url)
        await service.delete(product_id)
    except Exception as e:
        raise endpoint_error(e, status.HTTP_400_BAD_REQUEST, "delete_product")

    logger.info(
        f"Product deleted: {product_id}",
        user_id=principal.subject,
        metadata={"event": "product_deleted", "product_id": product_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
