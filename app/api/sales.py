from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    SaleNotFoundError
)
from app.services.sale_service import SaleService
from app.schemas.product import MessageResponse
from app.schemas.sale import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    SaleWithProduct
)

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get(
    "",
    response_model=List[SaleWithProduct],
    summary="List all sales",
    description="""
    Get every sale with the current name and price of its product.

    Sales whose product has been deleted report `productName` "Unknown"
    and `price` 0.
    """
)
def list_sales(db: Session = Depends(get_db)):
    """Get all sales, enriched with product details."""
    service = SaleService(db)
    return service.get_all()


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a sale",
    description="""
    Record a sale and deduct the quantity from the product's stock.

    Fails with 400 when the product has less stock than requested; the
    product is left unchanged in that case.
    """
)
def record_sale(
    sale_data: SaleCreate,
    db: Session = Depends(get_db)
):
    """
    Record a sale.

    - **productId**: ID of the product sold (required)
    - **quantity**: units sold, positive (required)
    """
    service = SaleService(db)

    try:
        sale = service.record_sale(sale_data)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InsufficientStockError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return SaleResponse(message="Sale recorded", sale=sale)


@router.patch(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Update a sale",
    description="""
    Correct a sale's quantity and optionally move it to another product.

    The old quantity is returned to the old product before the new quantity
    is checked against and deducted from the target product.
    """
)
def update_sale(
    sale_id: str,
    sale_data: SaleUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a sale.

    - **quantity**: corrected units sold (required)
    - **productId**: corrected product (optional, defaults to the current one)
    """
    service = SaleService(db)

    try:
        sale = service.update_sale(sale_id, sale_data)
    except (SaleNotFoundError, ProductNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InsufficientStockError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return SaleResponse(message="Sale updated", sale=sale)


@router.delete(
    "/{sale_id}",
    response_model=MessageResponse,
    summary="Delete a sale",
    description="Delete a sale and return its quantity to the product's stock."
)
def delete_sale(
    sale_id: str,
    db: Session = Depends(get_db)
):
    """Delete a sale."""
    service = SaleService(db)

    try:
        service.delete_sale(sale_id)
    except SaleNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return MessageResponse(message="Sale deleted")
