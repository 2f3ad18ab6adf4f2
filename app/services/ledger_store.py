from contextlib import contextmanager
from typing import Iterator
import logging
import threading

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import StorageError
from app.models.snapshot import LedgerSnapshot
from app.schemas.ledger import LedgerDocument

logger = logging.getLogger(__name__)

# Held for every load-to-commit cycle on the snapshot within this process
_ledger_lock = threading.Lock()


class LedgerStore:
    """
    Owner of the ledger state.

    The whole ledger lives in one snapshot row. Each operation loads the
    full document, works on an in-memory copy, and (for mutations) writes the
    full document back before returning.

    CONSISTENCY STRATEGY:
    =====================
    1. A process-wide lock is held from load to commit, so two requests never
       interleave their read-modify-write cycles.
    2. The snapshot row is selected FOR UPDATE, which serializes writers
       across processes on databases with row locks (SQLite ignores it).
    3. The document is committed only when the operation body finishes
       without raising. Any exception rolls the session back and the
       in-memory copy is discarded, so a failed request changes nothing.
    """

    def __init__(self, db: Session):
        self.db = db

    def read(self) -> LedgerDocument:
        """
        Load the current ledger document.

        Creates the snapshot row with empty collections on first access.

        Raises:
            StorageError: If the snapshot can't be loaded or parsed
        """
        with _ledger_lock:
            try:
                snapshot = self._get_snapshot(for_update=False)
                document = self._parse(snapshot)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to read ledger snapshot: {e}")
                raise StorageError("Failed to read ledger snapshot", e)
            except ValueError as e:
                # JSON column holding text that isn't valid JSON
                self.db.rollback()
                logger.error(f"Malformed ledger snapshot: {e}")
                raise StorageError("Malformed ledger snapshot", e)
            return document

    @contextmanager
    def transaction(self) -> Iterator[LedgerDocument]:
        """
        Unit of work over the ledger document.

        Yields the loaded document for in-place mutation and persists it
        when the block exits normally.

        Raises:
            StorageError: If the snapshot can't be loaded, parsed or written
        """
        with _ledger_lock:
            try:
                snapshot = self._get_snapshot(for_update=True)
                document = self._parse(snapshot)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to load ledger snapshot: {e}")
                raise StorageError("Failed to load ledger snapshot", e)
            except ValueError as e:
                self.db.rollback()
                logger.error(f"Malformed ledger snapshot: {e}")
                raise StorageError("Malformed ledger snapshot", e)

            try:
                yield document
            except Exception:
                self.db.rollback()
                raise

            try:
                snapshot.document = document.model_dump(mode="json", by_alias=True)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to write ledger snapshot: {e}")
                raise StorageError("Failed to write ledger snapshot", e)

    def _get_snapshot(self, for_update: bool) -> LedgerSnapshot:
        query = self.db.query(LedgerSnapshot).filter(
            LedgerSnapshot.id == LedgerSnapshot.SINGLETON_ID
        )
        if for_update:
            query = query.with_for_update()
        snapshot = query.first()

        if snapshot is None:
            logger.info("No ledger snapshot found, initializing an empty one")
            snapshot = LedgerSnapshot(
                id=LedgerSnapshot.SINGLETON_ID,
                document=LedgerDocument().model_dump(mode="json", by_alias=True),
            )
            self.db.add(snapshot)
            self.db.flush()

        return snapshot

    def _parse(self, snapshot: LedgerSnapshot) -> LedgerDocument:
        try:
            return LedgerDocument.model_validate(snapshot.document or {})
        except ValidationError as e:
            self.db.rollback()
            logger.error(f"Malformed ledger snapshot: {e}")
            raise StorageError("Malformed ledger snapshot", e)
