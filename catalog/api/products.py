from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Union
import logging

from catalog.database import get_db
from catalog.exceptions import ProductNotFoundError
from catalog.services.product_service import ProductService
from catalog.schemas.common import MAX_INT64, ApiResponse, PageMetadata, PagedResponse
from catalog.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from catalog.utils.product_mapper import to_entity, to_response, to_response_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

MAX_PAGE_SIZE = 2000
# Keeps page * size within the database offset range
MAX_PAGE = MAX_INT64 // MAX_PAGE_SIZE


@router.get(
    "/",
    response_model=ApiResponse[Union[PagedResponse[ProductResponse], List[ProductResponse]]],
    summary="List products",
    description="Get all active products, paged and sorted, or as a flat list when unpaged=true."
)
def list_products(
    page: int = Query(0, ge=0, le=MAX_PAGE, description="Page number (0-indexed)"),
    size: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
    sort: str = Query("id", description="Field to sort by"),
    direction: str = Query("asc", description="Sort direction: asc or desc"),
    unpaged: bool = Query(False, description="Return every product without pagination"),
    db: Session = Depends(get_db)
):
    """Get active products, paged by default."""
    logger.debug(f"GET /products page={page} size={size} sort={sort} direction={direction} unpaged={unpaged}")
    service = ProductService(db)

    if unpaged:
        return ApiResponse.ok(to_response_list(service.get_all()), "Products retrieved successfully")

    products, total = service.get_all_paged(page, size, sort, direction)
    paged = PagedResponse[ProductResponse](
        content=to_response_list(products),
        page=PageMetadata.build(page, size, total),
    )
    return ApiResponse.ok(paged, "Paged products retrieved successfully")


@router.post(
    "/",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product. Names must be unique among active products."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**: 2-100 characters (required)
    - **description**: Up to 500 characters (optional)
    - **price**: Positive, up to 8 integer and 2 decimal digits (required)
    - **category**: Letters and spaces only (required)
    - **stock**: Initial stock, must be non-negative (required)
    """
    logger.debug(f"POST /products name={product_data.name}")
    service = ProductService(db)
    product = service.create(to_entity(product_data))
    return ApiResponse.ok(to_response(product), "Product created successfully", status.HTTP_201_CREATED)


@router.get(
    "/category/{category}",
    response_model=ApiResponse[List[ProductResponse]],
    summary="List products by category",
    description="Get active products of a category (case-insensitive)."
)
def get_products_by_category(
    category: str,
    db: Session = Depends(get_db)
):
    logger.debug(f"GET /products/category/{category}")
    service = ProductService(db)
    products = service.get_by_category(category)
    return ApiResponse.ok(to_response_list(products), f"Products found for category: {category}")


@router.get(
    "/price-range",
    response_model=ApiResponse[List[ProductResponse]],
    summary="List products by price range",
    description="Get active products whose price lies within [minPrice, maxPrice]."
)
def get_products_by_price_range(
    min_price: Decimal = Query(..., alias="minPrice", ge=0, description="Minimum price"),
    max_price: Decimal = Query(..., alias="maxPrice", ge=0, description="Maximum price"),
    db: Session = Depends(get_db)
):
    logger.debug(f"GET /products/price-range min={min_price} max={max_price}")
    service = ProductService(db)
    products = service.get_by_price_range(min_price, max_price)
    return ApiResponse.ok(
        to_response_list(products),
        f"Products found in range ${min_price:.2f} - ${max_price:.2f}"
    )


@router.get(
    "/search",
    response_model=ApiResponse[List[ProductResponse]],
    summary="Search products by name",
    description="Get active products whose name contains the given text (case-insensitive)."
)
def search_products(
    name: str = Query(..., description="Text to search for in product names"),
    db: Session = Depends(get_db)
):
    logger.debug(f"GET /products/search name={name}")
    service = ProductService(db)
    products = service.search_by_name(name)
    return ApiResponse.ok(to_response_list(products), f"Products found for search: {name}")


@router.get(
    "/low-stock",
    response_model=ApiResponse[List[ProductResponse]],
    summary="List products with low stock",
    description="Get active products whose stock is below minStock."
)
def get_low_stock_products(
    min_stock: int = Query(..., alias="minStock", ge=0, le=MAX_INT64, description="Stock threshold"),
    db: Session = Depends(get_db)
):
    logger.debug(f"GET /products/low-stock minStock={min_stock}")
    service = ProductService(db)
    products = service.get_low_stock(min_stock)
    return ApiResponse.ok(to_response_list(products), f"Products with stock below {min_stock}")


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Get product by ID",
    description="Get a single active product."
)
def get_product(
    product_id: int = Path(..., ge=1, le=MAX_INT64, description="Product ID"),
    db: Session = Depends(get_db)
):
    logger.debug(f"GET /products/{product_id}")
    service = ProductService(db)
    product = service.get_by_id(product_id)

    if not product:
        raise ProductNotFoundError(product_id)

    return ApiResponse.ok(to_response(product), "Product found successfully")


@router.put(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Replace a product",
    description="Overwrite every writable field of an active product."
)
def update_product(
    product_data: ProductCreate,
    product_id: int = Path(..., ge=1, le=MAX_INT64, description="Product ID"),
    db: Session = Depends(get_db)
):
    logger.debug(f"PUT /products/{product_id} name={product_data.name}")
    service = ProductService(db)
    product = service.update(product_id, to_entity(product_data))
    return ApiResponse.ok(to_response(product), "Product updated successfully")


@router.patch(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Partially update a product",
    description="Update only the provided fields of an active product."
)
def patch_product(
    product_data: ProductUpdate,
    product_id: int = Path(..., ge=1, le=MAX_INT64, description="Product ID"),
    db: Session = Depends(get_db)
):
    logger.debug(f"PATCH /products/{product_id}")
    service = ProductService(db)
    product = service.partial_update(product_id, product_data)
    return ApiResponse.ok(to_response(product), "Product updated successfully")


@router.patch(
    "/{product_id}/stock",
    response_model=ApiResponse[ProductResponse],
    summary="Update product stock",
    description="Overwrite only the stock of an active product."
)
def update_product_stock(
    product_id: int = Path(..., ge=1, le=MAX_INT64, description="Product ID"),
    stock: int = Query(..., ge=0, le=MAX_INT64, description="New stock"),
    db: Session = Depends(get_db)
):
    logger.debug(f"PATCH /products/{product_id}/stock stock={stock}")
    service = ProductService(db)
    product = service.update_stock(product_id, stock)
    return ApiResponse.ok(to_response(product), "Stock updated successfully")


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[None],
    summary="Delete a product",
    description="Soft-delete a product: it is marked inactive and hidden from every query."
)
def delete_product(
    product_id: int = Path(..., ge=1, le=MAX_INT64, description="Product ID"),
    db: Session = Depends(get_db)
):
    logger.debug(f"DELETE /products/{product_id}")
    service = ProductService(db)
    service.delete(product_id)
    return ApiResponse.ok(None, "Product deleted successfully")
