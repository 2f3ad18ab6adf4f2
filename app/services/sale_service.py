from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import List
import logging
import uuid

from app.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    SaleNotFoundError,
)
from app.schemas.sale import Sale, SaleCreate, SaleUpdate, SaleWithProduct
from app.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown"


class SaleService:
    """
    Service class for the sales ledger.

    STOCK CONSERVATION:
    ===================
    A product's quantity is maintained incrementally, never recomputed from
    history:

        quantity = initial + sum(stock additions) - sum(recorded sales)

    so every operation that changes a sale's effect on stock first reverses
    the old effect and then applies the new one:

    - Recording a sale decrements the product's quantity.
    - Updating a sale adds the old quantity back to the old product, then
      decrements the (possibly different) target product.
    - Deleting a sale adds its quantity back.

    When the product a sale points at has been deleted, the reversal is
    skipped (and logged) rather than treated as an error.

    Every operation runs in one LedgerStore unit of work, so a failure part
    way through (e.g. insufficient stock after the reversal in an update)
    persists nothing.
    """

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def get_all(self) -> List[SaleWithProduct]:
        """
        Get all sales enriched with the current product name and price.

        Sales whose product no longer exists report ``"Unknown"`` and 0.
        """
        ledger = self.store.read()

        sales = []
        for sale in ledger.transactions:
            product = ledger.find_product(sale.product_id)
            sales.append(SaleWithProduct(
                **sale.model_dump(),
                product_name=product.name if product else UNKNOWN_PRODUCT_NAME,
                price=product.price if product else 0,
            ))
        return sales

    def record_sale(self, sale_data: SaleCreate) -> Sale:
        """
        Record a sale and deduct its quantity from stock.

        Args:
            sale_data: Product ID and quantity sold

        Returns:
            Created sale

        Raises:
            ProductNotFoundError: If product doesn't exist
            InsufficientStockError: If not enough stock available
        """
        with self.store.transaction() as ledger:
            product = ledger.find_product(sale_data.product_id)
            if not product:
                raise ProductNotFoundError("Product not found")

            if product.quantity < sale_data.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock. Available: {product.quantity}, Requested: {sale_data.quantity}"
                )

            product.quantity -= sale_data.quantity

            sale = Sale(
                id=uuid.uuid4().hex,
                product_id=product.id,
                quantity=sale_data.quantity,
                date=datetime.now(timezone.utc),
            )
            ledger.transactions.append(sale)

        logger.info(f"Sale {sale.id} recorded: {sale.quantity} x product {sale.product_id}")
        return sale

    def update_sale(self, sale_id: str, sale_data: SaleUpdate) -> Sale:
        """
        Correct a sale's quantity and optionally its product.

        Algorithm:
        1. Add the old quantity back to the old product (skipped if it's gone)
        2. Apply the new quantity and product reference, stamp the date
        3. Resolve the target product
        4. Check the target has enough stock, then decrement it

        Steps 3-4 see the stock restored by step 1, so lowering a sale on the
        same product always succeeds.

        Raises:
            SaleNotFoundError: If sale doesn't exist
            ProductNotFoundError: If the target product doesn't exist
            InsufficientStockError: If the target lacks stock for the new quantity
        """
        with self.store.transaction() as ledger:
            sale = ledger.find_sale(sale_id)
            if not sale:
                raise SaleNotFoundError("Sale not found")

            old_product = ledger.find_product(sale.product_id)
            if old_product:
                old_product.quantity += sale.quantity
            else:
                logger.warning(
                    f"Sale {sale_id} references missing product {sale.product_id}, stock reversal skipped"
                )

            sale.quantity = sale_data.quantity
            if sale_data.product_id is not None:
                sale.product_id = sale_data.product_id
            sale.date = datetime.now(timezone.utc)

            product = ledger.find_product(sale.product_id)
            if not product:
                raise ProductNotFoundError("Product not found")

            if product.quantity < sale.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock. Available: {product.quantity}, Requested: {sale.quantity}"
                )

            product.quantity -= sale.quantity

        logger.info(f"Sale {sale_id} updated: {sale.quantity} x product {sale.product_id}")
        return sale

    def delete_sale(self, sale_id: str) -> None:
        """
        Delete a sale and return its quantity to stock.

        Raises:
            SaleNotFoundError: If sale doesn't exist
        """
        with self.store.transaction() as ledger:
            sale = ledger.find_sale(sale_id)
            if not sale:
                raise SaleNotFoundError("Sale not found")

            product = ledger.find_product(sale.product_id)
            if product:
                product.quantity += sale.quantity
            else:
                logger.warning(
                    f"Sale {sale_id} references missing product {sale.product_id}, stock reversal skipped"
                )

            ledger.transactions = [s for s in ledger.transactions if s.id != sale_id]

        logger.info(f"Sale {sale_id} deleted")
