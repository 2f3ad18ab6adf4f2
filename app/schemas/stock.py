from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class StockAddition(BaseModel):
    """Immutable record of inventory added to a product."""
    id: str
    product_id: str = Field(..., alias="productId")
    # Snapshot of the product name at creation time
    product_name: Optional[str] = Field(None, alias="productName")
    quantity: int
    date: datetime

    model_config = ConfigDict(populate_by_name=True)


class StockAdditionCreate(BaseModel):
    """Schema for replenishing a product's stock."""
    quantity: int = Field(..., gt=0, description="Units to add (must be positive)")


class StockAdditionResponse(BaseModel):
    message: str
    stock_transaction: StockAddition = Field(..., alias="stockTransaction")

    model_config = ConfigDict(populate_by_name=True)
