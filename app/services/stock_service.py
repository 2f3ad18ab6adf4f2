from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import List
import logging
import uuid

from app.exceptions import ProductNotFoundError
from app.schemas.stock import StockAddition
from app.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class StockService:
    """Service class for stock replenishment."""

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def add_stock(self, product_id: str, quantity: int) -> StockAddition:
        """
        Add stock to a product and record the addition.

        Args:
            product_id: ID of the product to replenish
            quantity: Units to add (validated positive by the request schema)

        Returns:
            The new stock addition record

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        with self.store.transaction() as ledger:
            product = ledger.find_product(product_id)
            if not product:
                raise ProductNotFoundError("Product not found")

            product.quantity += quantity

            addition = StockAddition(
                id=uuid.uuid4().hex,
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                date=datetime.now(timezone.utc),
            )
            ledger.stock_transactions.append(addition)

        logger.info(f"Added {quantity} units to product {product_id}, now {product.quantity}")
        return addition

    def get_all(self) -> List[StockAddition]:
        """Get all stock additions in insertion order."""
        return self.store.read().stock_transactions
