import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.exceptions import BusinessRuleViolation, ProductNotFoundError
from app.models.product import Product
from app.repositories.product_repository import ProductRepository, ProductRepositoryInterface
from app.schemas.product import (
    ErrorResponse,
    MessageResponse,
    PaginationMeta,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ValidationErrorResponse,
)
from app.validation.product_rules import validate_product
from app.validation.rules import INTEGER_MAX, INTEGER_MIN

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

LIST_MESSAGE = "Daftar produk berhasil diambil."
SHOW_MESSAGE = "Detail produk berhasil diambil."
CREATED_MESSAGE = "Produk berhasil ditambahkan."
UPDATED_MESSAGE = "Produk berhasil diperbarui."
DELETED_MESSAGE = "Produk berhasil dihapus."
DELETE_FAILED_MESSAGE = "Gagal menghapus produk."
STORAGE_FAILED_MESSAGE = "Terjadi kesalahan pada server."

# Keeps the row offset inside a signed 32-bit range
MAX_PAGE = 100_000_000

PRODUCT_BODY_EXAMPLE = {
    "product_name": "Kopi Arabika 250g",
    "description": "Biji kopi sangrai medium",
    "product_price": 85000,
    "stock": 20,
}


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepositoryInterface:
    """Dependency to get a ProductRepository for the request's session"""
    return ProductRepository(db, per_page=get_settings().PRODUCTS_PER_PAGE)


def get_product_or_404(
    product_id: int = Path(..., ge=INTEGER_MIN, le=INTEGER_MAX, description="Product ID"),
    repository: ProductRepositoryInterface = Depends(get_product_repository)
) -> Product:
    """Resolve the ``product_id`` path parameter to a stored product."""
    product = repository.find(product_id)
    if not product:
        raise ProductNotFoundError(product_id)
    return product


@router.get(
    "",
    response_model=ProductListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="List products",
    description="Get a page of products, five per page by default."
)
def list_products(
    request: Request,
    page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number"),
    repository: ProductRepositoryInterface = Depends(get_product_repository)
):
    """
    Get paginated list of products.

    Responds with 201 rather than 200; existing clients rely on it.
    """
    products = repository.all(page)
    path = str(request.url.replace(query=""))

    return ProductListResponse(
        message=LIST_MESSAGE,
        data=[ProductResponse.model_validate(p) for p in products.items],
        pagination=PaginationMeta(
            total=products.total,
            current_page=products.current_page,
            per_page=products.per_page,
            last_page=products.last_page,
            next_page_url=products.next_page_url(path),
            previous_page_url=products.previous_page_url(path),
        )
    )


@router.get(
    "/{product_id}",
    response_model=ProductEnvelope,
    summary="Get product by ID",
    responses={404: {"model": MessageResponse}}
)
def get_product(product: Product = Depends(get_product_or_404)):
    """Get a product by ID."""
    return ProductEnvelope(message=SHOW_MESSAGE, data=ProductResponse.model_validate(product))


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    responses={422: {"model": ValidationErrorResponse}}
)
def create_product(
    payload: Optional[Dict[str, Any]] = Body(None, examples=[PRODUCT_BODY_EXAMPLE]),
    repository: ProductRepositoryInterface = Depends(get_product_repository)
):
    """
    Create a new product.

    - **product_name**: Product name, unique, at most 255 characters (required)
    - **description**: Free-form description (optional)
    - **product_price**: Price, must be at least 0 (required)
    - **stock**: Initial stock, integer, at least 0 (required)
    """
    fields = validate_product(payload, name_taken=repository.name_exists)
    product = repository.create(fields)

    return ProductEnvelope(message=CREATED_MESSAGE, data=ProductResponse.model_validate(product))


@router.put(
    "/{product_id}",
    response_model=ProductEnvelope,
    summary="Update a product",
    responses={404: {"model": MessageResponse}, 422: {"model": ValidationErrorResponse}}
)
def update_product(
    payload: Optional[Dict[str, Any]] = Body(None, examples=[PRODUCT_BODY_EXAMPLE]),
    product: Product = Depends(get_product_or_404),
    repository: ProductRepositoryInterface = Depends(get_product_repository)
):
    """
    Update a product.

    Same rules as creation; the product may keep its own name.
    An omitted description keeps its stored value.
    """
    fields = validate_product(
        payload,
        name_taken=lambda name: repository.name_exists(name, ignore_id=product.id)
    )
    product = repository.update(product, fields)

    return ProductEnvelope(message=UPDATED_MESSAGE, data=ProductResponse.model_validate(product))


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Delete a product",
    description="Delete a product. Products with stock left cannot be deleted.",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": MessageResponse},
        500: {"model": ErrorResponse},
    }
)
def delete_product(
    product: Product = Depends(get_product_or_404),
    repository: ProductRepositoryInterface = Depends(get_product_repository)
):
    """
    Delete a product.

    Responds with 201 on success for compatibility with existing clients.
    A product that still has stock is refused with 400; a storage failure
    is reported as 500.
    """
    product_id = product.id
    try:
        repository.delete(product)
    except BusinessRuleViolation as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "error", "message": DELETE_FAILED_MESSAGE, "error": str(e)}
        )
    except SQLAlchemyError as e:
        logger.error(f"Error deleting product #{product_id}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": DELETE_FAILED_MESSAGE, "error": STORAGE_FAILED_MESSAGE}
        )

    return MessageResponse(status="success", message=DELETED_MESSAGE)
