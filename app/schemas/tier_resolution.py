from datetime import date
from typing import List, Optional

from pydantic import BaseModel, computed_field

from app.schemas.campaign import CampaignSummaryOut
from app.schemas.campaign_tier import CampaignTierOut
from app.services.formatting import format_date_br, format_points
from app.services.tier_resolver import ResolvedView


class CampaignProgressOut(CampaignSummaryOut):
    target_points: int
    points_needed: int

    next_tier: Optional[CampaignTierOut] = None
    tiers: List[CampaignTierOut] = []

    @computed_field
    @property
    def target_points_formatted(self) -> str:
        return format_points(self.target_points)

    @computed_field
    @property
    def points_needed_formatted(self) -> str:
        return format_points(self.points_needed)


class TierResolutionOut(BaseModel):
    as_of: date
    total_points: float
    days_remaining: int

    campaign: Optional[CampaignSummaryOut] = None
    current_tier: Optional[CampaignTierOut] = None

    next_tier: Optional[CampaignTierOut] = None
    next_tier_origin: Optional[str] = None
    next_tier_campaign_id: Optional[int] = None

    next_tiers: List[CampaignTierOut] = []
    other_campaigns: List[CampaignProgressOut] = []

    @computed_field
    @property
    def total_points_formatted(self) -> str:
        return format_points(self.total_points)

    @computed_field
    @property
    def as_of_display(self) -> str:
        return format_date_br(self.as_of)


def build_resolution_out(view: ResolvedView) -> TierResolutionOut:
    def tier(t):
        return CampaignTierOut.model_validate(t) if t is not None else None

    return TierResolutionOut(
        as_of=view.as_of,
        total_points=view.total_points,
        days_remaining=view.days_remaining,
        campaign=CampaignSummaryOut.model_validate(view.campaign) if view.campaign is not None else None,
        current_tier=tier(view.current_tier),
        next_tier=tier(view.next_tier),
        next_tier_origin=view.next_tier_origin,
        next_tier_campaign_id=view.next_tier_campaign_id,
        next_tiers=[tier(t) for t in view.next_tiers],
        other_campaigns=[
            CampaignProgressOut(
                id=p.campaign.id,
                title=p.campaign.title,
                banner=p.campaign.banner,
                regulation=p.campaign.regulation,
                start_date=p.campaign.start_date,
                end_date=p.campaign.end_date,
                target_points=p.target_points,
                points_needed=p.points_needed,
                next_tier=tier(p.next_tier),
                tiers=[tier(t) for t in p.tiers],
            )
            for p in view.other_campaigns
        ],
    )
