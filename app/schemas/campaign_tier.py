from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, computed_field

from app.services.formatting import companion_text, format_money, format_points, points_range_text


class CampaignTierIn(BaseModel):
    # present when updating an existing tier, absent for a new one
    id: Optional[int] = None

    min_points: int
    max_points: Optional[int] = None

    companion_allowed: bool = False
    description: Optional[str] = None
    prize_value: Optional[Decimal] = None


class CampaignTierPrizeUpdate(BaseModel):
    prize_value: Decimal


class CampaignTierOut(BaseModel):
    id: int
    campaign_id: Optional[int] = None

    min_points: int
    max_points: Optional[int] = None

    companion_allowed: bool
    description: Optional[str] = None
    prize_value: Optional[Decimal] = None

    @computed_field
    @property
    def min_points_formatted(self) -> str:
        return format_points(self.min_points)

    @computed_field
    @property
    def max_points_formatted(self) -> Optional[str]:
        return format_points(self.max_points)

    @computed_field
    @property
    def points_range(self) -> str:
        return points_range_text(self.min_points, self.max_points)

    @computed_field
    @property
    def companion_text(self) -> str:
        return companion_text(self.companion_allowed)

    @computed_field
    @property
    def prize_value_formatted(self) -> Optional[str]:
        return format_money(self.prize_value)

    class Config:
        from_attributes = True
