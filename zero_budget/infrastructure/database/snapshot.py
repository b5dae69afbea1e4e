"""Loading and flushing the budget snapshot through the database"""

from typing import Any, Dict

from sqlalchemy.orm import sessionmaker
from zero_budget.config import settings
from zero_budget.domain.state import BudgetState
from zero_budget.infrastructure.database.repositories import SnapshotRepository
from zero_budget.infrastructure.database.serialization import state_from_document, state_to_document


class SnapshotStore:
    """Reads the budget document once at startup and rewrites it after each mutation"""

    def __init__(self, session_factory: sessionmaker, storage_key: str | None = None):
        self.session_factory = session_factory
        self.storage_key = storage_key or settings.storage_key

    def load(self) -> BudgetState:
        """Stored state, or empty state when nothing has been saved yet"""
        db = self.session_factory()
        try:
            document = SnapshotRepository(db).get_document(self.storage_key)
        finally:
            db.close()
        return state_from_document(document)

    def save(self, state: BudgetState) -> None:
        """Replace the stored document with the current state"""
        self.save_document(state_to_document(state))

    def save_document(self, document: Dict[str, Any]) -> None:
        """
        Replace the stored document with an already encoded one.

        Raises:
            SQLAlchemyError: On any database failure (the session is rolled back)
        """
        db = self.session_factory()
        try:
            SnapshotRepository(db).save_document(self.storage_key, document)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
