from pydantic import BaseModel, Field, field_validator
from typing import Optional


class Product(BaseModel):
    """A sellable item with a tracked quantity on hand."""
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: float = 0
    quantity: int = 0
    image: Optional[str] = ""


class ProductCreate(BaseModel):
    """Schema for creating a new product. Price and quantity default to 0."""
    name: Optional[str] = Field(None, description="Product name")
    description: Optional[str] = Field(None, description="Free-text description")
    category: Optional[str] = Field(None, description="Free-text category")
    price: float = Field(default=0, ge=0, description="Unit price (non-negative)")
    quantity: int = Field(default=0, ge=0, description="Initial stock on hand")
    image: Optional[str] = Field("", description="Image reference")

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def null_as_zero(cls, value):
        return 0 if value is None else value


class ProductUpdate(BaseModel):
    """
    Schema for updating an existing product. All fields are optional.

    Fields sent as null are treated as "no change". Setting ``quantity`` here
    is a direct correction and does not record a stock addition.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None


class ProductMutationResponse(BaseModel):
    message: str
    product: Product


class MessageResponse(BaseModel):
    message: str
