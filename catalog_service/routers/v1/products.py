"""
Product endpoints for API v1.

Reads are public; create, update and delete require an admin principal.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ...dependencies import get_product_repository, require_admin
from ...exceptions import NotFoundException
from ...models import (
    MessageResponse,
    ProductCreate,
    ProductMessageResponse,
    ProductResponse,
    ProductUpdate,
)
from ...repositories import ProductRepository

router = APIRouter(prefix="/api/products", tags=["Products"])


def _response(product) -> ProductResponse:
    return ProductResponse.model_validate(product.to_document())


@router.get("", response_model=List[ProductResponse], summary="List products")
async def list_products(products: ProductRepository = Depends(get_product_repository)):
    return [_response(product) for product in await products.get_all()]


@router.get(
    "/category/{category}",
    response_model=List[ProductResponse],
    summary="List products in a category",
)
async def list_products_by_category(
    category: str, products: ProductRepository = Depends(get_product_repository)
):
    """Exact category match, in insertion order."""
    return [_response(product) for product in await products.find_by_category(category)]


@router.get("/{product_id}", response_model=ProductResponse, summary="Get a product by ID")
async def get_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    product = await products.find_by_id(product_id)
    if product is None:
        raise NotFoundException("Product", product_id)
    return _response(product)


@router.post(
    "",
    response_model=ProductMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    dependencies=[Depends(require_admin)],
)
async def create_product(
    product_data: ProductCreate,
    products: ProductRepository = Depends(get_product_repository),
):
    product = await products.create(
        name=product_data.name,
        description=product_data.description,
        price=product_data.price,
        category=product_data.category,
        stock=product_data.stock,
    )
    return ProductMessageResponse(
        message="Product created successfully", product=_response(product)
    )


@router.put(
    "/{product_id}",
    response_model=ProductMessageResponse,
    summary="Update a product",
    dependencies=[Depends(require_admin)],
)
async def update_product(
    product_id: str,
    product_update: ProductUpdate,
    products: ProductRepository = Depends(get_product_repository),
):
    """
    Merge-patch a product. Fields left out of the body keep their values.

    Raises:
        NotFoundException: If no product has this id
    """
    product = await products.update(
        product_id, product_update.model_dump(exclude_unset=True)
    )
    return ProductMessageResponse(
        message="Product updated successfully", product=_response(product)
    )


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
    dependencies=[Depends(require_admin)],
)
async def delete_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    if not await products.delete(product_id):
        raise NotFoundException("Product", product_id)
    return MessageResponse(message="Product deleted successfully", success=True)
