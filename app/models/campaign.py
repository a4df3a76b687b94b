from sqlalchemy import Column, Date, Integer, String, Text, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db import Base


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    rules = Column(Text)
    regulation = Column(Text)

    # stored file name only ("hash.ext"), served by the storage layer
    banner = Column(String(255))

    start_date = Column(Date, nullable=False)
    # NULL = open-ended campaign
    end_date = Column(Date, nullable=True)

    status = Column(String(20), nullable=False, default="ACTIVE")  # DRAFT / ACTIVE / INACTIVE

    # flat "reach N points" campaigns declare a target instead of tiers
    target_points = Column(Integer, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())

    tiers = relationship(
        "CampaignTier",
        back_populates="campaign",
        order_by="CampaignTier.min_points",
        cascade="all, delete-orphan",
    )
