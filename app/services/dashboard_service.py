from sqlalchemy.orm import Session

from app.schemas.ledger import DashboardResponse
from app.services.ledger_store import LedgerStore


class DashboardService:
    """Read-only combined view used by the dashboard."""

    def __init__(self, db: Session):
        self.store = LedgerStore(db)

    def get_data(self) -> DashboardResponse:
        ledger = self.store.read()
        return DashboardResponse(products=ledger.products, transactions=ledger.transactions)
