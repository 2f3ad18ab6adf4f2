from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class Sale(BaseModel):
    """Record of inventory removed from a product by a sale."""
    id: str
    product_id: str = Field(..., alias="productId")
    quantity: int
    date: datetime

    model_config = ConfigDict(populate_by_name=True)


class SaleCreate(BaseModel):
    """Schema for recording a sale."""
    product_id: str = Field(..., alias="productId", description="ID of the product sold")
    quantity: int = Field(..., gt=0, description="Units sold")

    model_config = ConfigDict(populate_by_name=True)


class SaleUpdate(BaseModel):
    """Schema for correcting a sale. The product is kept when ``productId`` is omitted."""
    quantity: int = Field(..., gt=0, description="Corrected units sold")
    product_id: Optional[str] = Field(None, alias="productId", description="Corrected product")

    model_config = ConfigDict(populate_by_name=True)


class SaleWithProduct(Sale):
    """Sale enriched with the current name and price of its product."""
    product_name: str = Field(..., alias="productName")
    price: float


class SaleResponse(BaseModel):
    message: str
    sale: Sale
