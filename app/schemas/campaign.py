from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, computed_field

from app.schemas.campaign_tier import CampaignTierIn, CampaignTierOut
from app.services.formatting import format_date_br, period_text


class CampaignCreate(BaseModel):
    title: str
    description: Optional[str] = None
    rules: Optional[str] = None
    regulation: Optional[str] = None
    banner: Optional[str] = None

    start_date: date
    end_date: Optional[date] = None

    status: str = "ACTIVE"
    target_points: Optional[int] = None

    tiers: List[CampaignTierIn] = []


class CampaignUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    rules: Optional[str] = None
    regulation: Optional[str] = None
    banner: Optional[str] = None

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    target_points: Optional[int] = None

    # when given, replaces the campaign's tiers (ids kept, missing ones removed)
    tiers: Optional[List[CampaignTierIn]] = None


class CampaignStatusUpdate(BaseModel):
    status: str


class CampaignSummaryOut(BaseModel):
    id: int
    title: str
    banner: Optional[str] = None
    regulation: Optional[str] = None

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @computed_field
    @property
    def start_date_display(self) -> Optional[str]:
        return format_date_br(self.start_date)

    @computed_field
    @property
    def end_date_display(self) -> Optional[str]:
        return format_date_br(self.end_date)

    @computed_field
    @property
    def period(self) -> Optional[str]:
        return period_text(self.start_date, self.end_date)

    class Config:
        from_attributes = True


class CampaignOut(CampaignSummaryOut):
    description: Optional[str] = None
    rules: Optional[str] = None

    status: str
    target_points: Optional[int] = None

    created_at: Optional[datetime] = None

    tiers: List[CampaignTierOut] = []
