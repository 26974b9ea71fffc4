from sqlalchemy import Column, Integer, DateTime
from ..db.base import Base


class BusinessDay(Base):
    """Рабочий день (смена): открыт, пока closed_at пуст."""

    __tablename__ = "business_days"

    id = Column(Integer, primary_key=True, index=True)
    opened_at = Column(DateTime(timezone=True), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)
