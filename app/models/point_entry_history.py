from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, TIMESTAMP
from sqlalchemy.sql import func

from app.db import Base


class PointEntryHistory(Base):
    __tablename__ = "point_entry_history"

    id = Column(Integer, primary_key=True, autoincrement=True)

    point_entry_id = Column(Integer, ForeignKey("point_entries.id"), nullable=False)
    changed_by = Column(Integer, nullable=False)

    previous_value = Column(Numeric(12, 2))
    new_value = Column(Numeric(12, 2))

    previous_reference_date = Column(Date)
    new_reference_date = Column(Date)

    changed_at = Column(TIMESTAMP, server_default=func.now())
