"""Data access layer for budget snapshots"""

from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from zero_budget.infrastructure.database.models import BudgetSnapshot


class SnapshotRepository:
    """Repository for the persisted budget document"""

    def __init__(self, db: Session):
        self.db = db

    def get_document(self, storage_key: str) -> Optional[Dict[str, Any]]:
        """Fetch the stored document, or None on first run"""
        snapshot = self.db.get(BudgetSnapshot, storage_key)
        return snapshot.document if snapshot is not None else None

    def save_document(self, storage_key: str, document: Dict[str, Any]) -> BudgetSnapshot:
        """Insert or replace the document under `storage_key`"""
        snapshot = self.db.get(BudgetSnapshot, storage_key)
        if snapshot is None:
            snapshot = BudgetSnapshot(storage_key=storage_key, document=document)
            self.db.add(snapshot)
        else:
            snapshot.document = document
        self.db.flush()
        return snapshot
