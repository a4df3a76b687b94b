from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.db import Base


class CampaignTier(Base):
    __tablename__ = "campaign_tiers"

    id = Column(Integer, primary_key=True, autoincrement=True)

    campaign_id = Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)

    min_points = Column(Integer, nullable=False)
    # NULL = open tier ("a partir de min_points")
    max_points = Column(Integer, nullable=True)

    companion_allowed = Column(Boolean, nullable=False, default=False)
    description = Column(String(255))

    prize_value = Column(Numeric(12, 2), nullable=True)

    campaign = relationship("Campaign", back_populates="tiers")
