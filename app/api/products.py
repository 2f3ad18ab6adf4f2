from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.exceptions import ProductNotFoundError
from app.services.product_service import ProductService
from app.services.stock_service import StockService
from app.schemas.product import (
    Product,
    ProductCreate,
    ProductUpdate,
    ProductMutationResponse,
    MessageResponse
)
from app.schemas.stock import StockAdditionCreate, StockAdditionResponse

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=List[Product],
    summary="List all products",
    description="Get every product in insertion order."
)
def list_products(db: Session = Depends(get_db)):
    """Get all products."""
    service = ProductService(db)
    return service.get_all()


@router.post(
    "",
    response_model=ProductMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product. Price and quantity default to 0."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**, **description**, **category**: free text
    - **price**: unit price, non-negative (default 0)
    - **quantity**: initial stock, non-negative (default 0)
    - **image**: optional image reference
    """
    service = ProductService(db)
    product = service.create(product_data)
    return ProductMutationResponse(message="Product added", product=product)


@router.patch(
    "/{product_id}",
    response_model=ProductMutationResponse,
    summary="Update a product",
    description="Update product details. Only provided, non-null fields are updated."
)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    Sending `quantity` overwrites the stock on hand as a direct correction;
    no stock transaction is recorded for it.
    """
    service = ProductService(db)

    try:
        product = service.update(product_id, product_data)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return ProductMutationResponse(message="Product updated", product=product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
    description="Delete a product by ID. Deleting an unknown ID also succeeds."
)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db)
):
    """Delete a product. Its sales and stock transactions are kept."""
    service = ProductService(db)
    service.delete(product_id)
    return MessageResponse(message="Product deleted")


@router.patch(
    "/{product_id}/add-stock",
    response_model=StockAdditionResponse,
    summary="Add stock to a product",
    description="Increase a product's quantity and record a stock transaction."
)
def add_stock(
    product_id: str,
    stock_data: StockAdditionCreate,
    db: Session = Depends(get_db)
):
    """
    Replenish a product.

    - **quantity**: units to add, must be a positive integer
    """
    service = StockService(db)

    try:
        addition = service.add_stock(product_id, stock_data.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return StockAdditionResponse(message="Stock added", stock_transaction=addition)
