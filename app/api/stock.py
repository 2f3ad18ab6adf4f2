from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.services.stock_service import StockService
from app.schemas.stock import StockAddition

router = APIRouter(prefix="/stock-transactions", tags=["Stock"])


@router.get(
    "",
    response_model=List[StockAddition],
    summary="List stock transactions",
    description="Get every stock addition in insertion order."
)
def list_stock_transactions(db: Session = Depends(get_db)):
    """Get all stock additions."""
    service = StockService(db)
    return service.get_all()
