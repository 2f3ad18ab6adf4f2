from sqlalchemy import Column, Integer, JSON, DateTime
from sqlalchemy.sql import func

from app.database import Base


class LedgerSnapshot(Base):
    """
    Single-row table holding the whole ledger as one JSON document.

    The document has three top-level collections: ``products``,
    ``transactions`` (sales) and ``stockTransactions``. It is read in full
    and overwritten in full by every ledger operation.

    Attributes:
        id: Row identifier (always ``LedgerSnapshot.SINGLETON_ID``)
        document: Serialized ledger document
        created_at: Timestamp when the snapshot row was created
        updated_at: Timestamp of the last write
    """
    __tablename__ = "ledger_snapshots"

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True)
    document = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<LedgerSnapshot(id={self.id}, updated_at={self.updated_at})>"
