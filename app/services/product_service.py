from sqlalchemy.orm import Session
from typing import List
import logging
import uuid

from app.exceptions import ProductNotFoundError
from app.schemas.product import Product, ProductCreate, ProductUpdate
from app.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for the product registry.

    This service handles:
    - Listing products in insertion order
    - Creating products
    - Partial updates (including direct quantity corrections)
    - Idempotent deletion
    """

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def get_all(self) -> List[Product]:
        """Get all products in insertion order."""
        return self.store.read().products

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            product_data: Product creation data

        Returns:
            Created product
        """
        product = Product(id=uuid.uuid4().hex, **product_data.model_dump())

        with self.store.transaction() as ledger:
            ledger.products.append(product)

        logger.info(f"Product {product.id} created with quantity {product.quantity}")
        return product

    def update(self, product_id: str, product_data: ProductUpdate) -> Product:
        """
        Update an existing product.

        Only fields that were sent and are not null are applied. A quantity
        sent here overwrites the stock on hand without recording a stock
        addition.

        Args:
            product_id: ID of product to update
            product_data: Update data

        Returns:
            Updated product

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        with self.store.transaction() as ledger:
            product = ledger.find_product(product_id)
            if not product:
                raise ProductNotFoundError("Product not found")

            update_data = product_data.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is not None:
                    setattr(product, field, value)

        if update_data.get("quantity") is not None:
            logger.info(f"Product {product_id} quantity corrected to {product.quantity}")
        return product

    def delete(self, product_id: str) -> None:
        """
        Delete a product.

        Deleting an unknown ID is not an error. Sales and stock additions
        referencing the product are left untouched.
        """
        with self.store.transaction() as ledger:
            ledger.products = [p for p in ledger.products if p.id != product_id]

        logger.info(f"Product {product_id} deleted")
