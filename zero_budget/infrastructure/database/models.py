"""SQLAlchemy ORM models for persisted budget state"""

from sqlalchemy import Column, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class BudgetSnapshot(Base):
    """Whole budget document stored under a single key"""

    __tablename__ = "budget_snapshot"

    storage_key = Column(Text, primary_key=True)
    document = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
