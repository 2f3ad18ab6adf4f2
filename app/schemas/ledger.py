from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.schemas.product import Product
from app.schemas.sale import Sale
from app.schemas.stock import StockAddition


class LedgerDocument(BaseModel):
    """
    The complete persisted ledger state.

    Collections missing from a stored document default to empty lists.
    ``transactions`` holds the sales.
    """
    products: list[Product] = Field(default_factory=list)
    transactions: list[Sale] = Field(default_factory=list)
    stock_transactions: list[StockAddition] = Field(default_factory=list, alias="stockTransactions")

    model_config = ConfigDict(populate_by_name=True)

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def find_sale(self, sale_id: str) -> Optional[Sale]:
        return next((s for s in self.transactions if s.id == sale_id), None)


class DashboardResponse(BaseModel):
    """Combined products and sales for the dashboard view."""
    products: list[Product]
    transactions: list[Sale]
