from sqlalchemy import Column, Date, Index, Integer, Numeric, String, TIMESTAMP
from sqlalchemy.sql import func

from app.db import Base


class PointEntry(Base):
    __tablename__ = "point_entries"

    __table_args__ = (
        Index("ix_point_entries_professional_reference", "professional_id", "reference_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    professional_id = Column(Integer, nullable=False)
    store_id = Column(Integer, nullable=True)
    registrant_id = Column(Integer, nullable=False)
    client_id = Column(Integer, nullable=True)

    value = Column(Numeric(12, 2), nullable=False)
    quote = Column(String(255))

    # date the points count toward
    reference_date = Column(Date, nullable=False)

    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE / DELETED

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
