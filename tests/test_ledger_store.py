"""Tests for ledger persistence, locking and failure handling."""
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.exceptions import InsufficientStockError, StorageError
from app.models.snapshot import LedgerSnapshot
from app.schemas.product import ProductCreate
from app.schemas.sale import SaleCreate, SaleUpdate
from app.services.ledger_store import LedgerStore
from app.services.product_service import ProductService
from app.services.sale_service import SaleService
from app.services.stock_service import StockService


def _store_document(db_session, document):
    db_session.add(LedgerSnapshot(id=LedgerSnapshot.SINGLETON_ID, document=document))
    db_session.commit()


def test_first_read_initializes_empty_snapshot(db_session):
    """Test the snapshot row is created with empty collections on first read."""
    ledger = LedgerStore(db_session).read()

    assert ledger.products == []
    assert ledger.transactions == []
    assert ledger.stock_transactions == []

    snapshot = db_session.query(LedgerSnapshot).one()
    assert snapshot.document == {"products": [], "transactions": [], "stockTransactions": []}


def test_missing_collections_default_to_empty(db_session):
    """Test a document with only products loads the other collections as empty."""
    _store_document(db_session, {
        "products": [{"id": "p1", "name": "Legacy", "price": 1, "quantity": 2}]
    })

    ledger = LedgerStore(db_session).read()

    assert ledger.products[0].name == "Legacy"
    assert ledger.transactions == []
    assert ledger.stock_transactions == []


def test_document_uses_camel_case_keys(db_session):
    """Test the persisted layout keeps the wire field names."""
    product = ProductService(db_session).create(ProductCreate(name="Scone", quantity=5))
    StockService(db_session).add_stock(product.id, 2)
    SaleService(db_session).record_sale(SaleCreate(productId=product.id, quantity=1))

    document = db_session.query(LedgerSnapshot).one().document

    assert set(document) == {"products", "transactions", "stockTransactions"}
    assert document["stockTransactions"][0]["productName"] == "Scone"
    assert document["transactions"][0]["productId"] == product.id
    assert document["products"][0]["quantity"] == 6


def test_malformed_snapshot_raises_storage_error(db_session):
    """Test an unparseable document surfaces as a storage error."""
    _store_document(db_session, {"products": "not a list"})

    with pytest.raises(StorageError):
        LedgerStore(db_session).read()


def test_malformed_snapshot_returns_500(client, db_session):
    """Test storage errors reach the caller as a generic 500."""
    _store_document(db_session, {"products": [{"name": "missing id"}]})

    response = client.get("/products")

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}


def test_non_json_snapshot_returns_500(client, db_session):
    """Test a document column holding invalid JSON text is reported as a storage error."""
    db_session.execute(text("INSERT INTO ledger_snapshots (id, document) VALUES (1, 'not json{')"))
    db_session.commit()

    read_response = client.get("/products")
    write_response = client.post("/products", json={"name": "Espresso"})

    assert read_response.status_code == 500
    assert read_response.json() == {"detail": "Server error"}
    assert write_response.status_code == 500
    assert write_response.json() == {"detail": "Server error"}

    with pytest.raises(StorageError):
        LedgerStore(db_session).read()


def test_failed_write_discards_mutation(db_session):
    """Test a failed commit leaves the persisted ledger untouched."""
    product = ProductService(db_session).create(ProductCreate(name="Widget", quantity=5))
    failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))

    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(StorageError):
            StockService(db_session).add_stock(product.id, 3)

    assert ProductService(db_session).get_all()[0].quantity == 5
    assert StockService(db_session).get_all() == []


def test_failed_operation_is_not_persisted(db_session):
    """Test a domain error inside an update rolls back the stock reversal."""
    product = ProductService(db_session).create(ProductCreate(name="Widget", quantity=10))
    service = SaleService(db_session)
    sale = service.record_sale(SaleCreate(productId=product.id, quantity=4))

    with pytest.raises(InsufficientStockError):
        service.update_sale(sale.id, SaleUpdate(quantity=50))

    assert ProductService(db_session).get_all()[0].quantity == 6
    assert service.get_all()[0].quantity == 4


def test_concurrent_sales_never_oversell(db_session, session_factory):
    """Test parallel sales of the last items serialize on the ledger lock."""
    product = ProductService(db_session).create(ProductCreate(name="Limited", quantity=10))

    def sell_one(_):
        db = session_factory()
        try:
            SaleService(db).record_sale(SaleCreate(productId=product.id, quantity=1))
            return True
        except InsufficientStockError:
            return False
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(sell_one, range(25)))

    assert results.count(True) == 10
    assert ProductService(db_session).get_all()[0].quantity == 0
    assert len(SaleService(db_session).get_all()) == 10
