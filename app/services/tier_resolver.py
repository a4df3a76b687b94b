"""
Campaign/tier resolution for a professional's annual points.

Given the points accumulated in the calendar year and the campaigns active on a
given day, works out the campaign and tier the professional is in, the next tier
to reach (searched across every reachable campaign, not only the current one),
the remaining tiers of the current campaign and the other campaigns ranked by
how close their first tier is.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.config import APP_TIMEZONE
from app.models.campaign import Campaign
from app.models.campaign_tier import CampaignTier
from app.services.campaign_catalog import active_campaigns_with_tiers, campaign_order_key
from app.services.formatting import round_half_away
from app.services.points_service import total_points


logger = logging.getLogger(__name__)

ORIGIN_CURRENT_CAMPAIGN = "CURRENT_CAMPAIGN"
ORIGIN_OTHER_CAMPAIGN = "OTHER_CAMPAIGN"


@dataclass
class CampaignProgress:
    campaign: Campaign
    target_points: int
    points_needed: int
    next_tier: CampaignTier | None = None
    tiers: list[CampaignTier] = field(default_factory=list)


@dataclass
class ResolvedView:
    total_points: float
    as_of: date
    days_remaining: int = 0
    campaign: Campaign | None = None
    current_tier: CampaignTier | None = None
    next_tier: CampaignTier | None = None
    next_tier_origin: str | None = None
    next_tier_campaign_id: int | None = None
    next_tiers: list[CampaignTier] = field(default_factory=list)
    other_campaigns: list[CampaignProgress] = field(default_factory=list)


def local_today() -> date:
    return datetime.now(ZoneInfo(APP_TIMEZONE)).date()


def points_needed(target, points: float) -> int:
    return max(0, round_half_away(float(target) - float(points)))


def tier_contains(tier, points: float) -> bool:
    if points < float(tier.min_points):
        return False
    return tier.max_points is None or points <= float(tier.max_points)


def _sorted_tiers(campaign) -> list:
    return sorted(campaign.tiers or [], key=lambda t: (t.min_points, t.id or 0))


def _tiers_above(campaign, points: float) -> list:
    return [t for t in _sorted_tiers(campaign) if float(t.min_points) > points]


def _entry_tier(campaign, points: float):
    above = _tiers_above(campaign, points)
    return above[0] if above else None


def is_reachable(campaign, points: float) -> bool:
    """False once the points are past every (finite) tier of the campaign."""
    tiers = campaign.tiers or []
    if not tiers:
        return False
    if any(t.max_points is None for t in tiers):
        return True
    return points <= float(max(t.max_points for t in tiers))


def days_remaining(campaign, as_of: date) -> int:
    # whole days from the start of as_of to the end of the campaign's last day
    if campaign is None or campaign.end_date is None:
        return 0
    return max(0, (campaign.end_date - as_of).days)


def _current_tier(campaign, points: float):
    matches = [t for t in _sorted_tiers(campaign) if tier_contains(t, points)]
    if not matches:
        return None
    return max(matches, key=lambda t: t.min_points)


def resolve_snapshot(
    points: float,
    campaigns: list,
    as_of: date,
    include_next_tiers: bool = True,
    include_other_campaigns: bool = True,
) -> ResolvedView:
    points = float(points or 0)
    view = ResolvedView(total_points=points, as_of=as_of)

    reachable = sorted(
        (c for c in campaigns if is_reachable(c, points)),
        key=campaign_order_key,
    )

    # current campaign: first one (ending soonest) with a tier containing the points
    for campaign in reachable:
        tier = _current_tier(campaign, points)
        if tier is not None:
            view.campaign = campaign
            view.current_tier = tier
            break

    # none contains the points: the campaign whose entry tier is the lowest
    if view.campaign is None:
        best = None
        for campaign in reachable:
            entry = _entry_tier(campaign, points)
            if entry is not None and (best is None or entry.min_points < best[1].min_points):
                best = (campaign, entry)
        if best is not None:
            view.campaign = best[0]

    view.days_remaining = days_remaining(view.campaign, as_of)

    candidate = None
    owner = None
    if view.campaign is not None:
        above = _tiers_above(view.campaign, points)
        if above:
            candidate, owner = above[0], view.campaign
        if include_next_tiers:
            view.next_tiers = above[1:]

    if include_other_campaigns:
        for campaign in reachable:
            if campaign is view.campaign:
                continue
            entry = _entry_tier(campaign, points)
            if entry is None:
                continue
            if candidate is None or entry.min_points < candidate.min_points:
                candidate, owner = entry, campaign

            view.other_campaigns.append(
                CampaignProgress(
                    campaign=campaign,
                    target_points=int(entry.min_points),
                    points_needed=points_needed(entry.min_points, points),
                    next_tier=entry,
                    tiers=_tiers_above(campaign, points),
                )
            )
        # stable: equal targets keep campaign order
        view.other_campaigns.sort(key=lambda p: p.target_points)

    if candidate is not None:
        view.next_tier = candidate
        view.next_tier_campaign_id = owner.id
        view.next_tier_origin = (
            ORIGIN_CURRENT_CAMPAIGN if owner is view.campaign else ORIGIN_OTHER_CAMPAIGN
        )

    return view


def resolve(
    db: Session,
    professional_id: int,
    as_of: date | None = None,
    include_next_tiers: bool = True,
    include_other_campaigns: bool = True,
) -> ResolvedView:
    as_of = as_of or local_today()

    points = total_points(db, professional_id, as_of)
    campaigns = active_campaigns_with_tiers(db, as_of)

    view = resolve_snapshot(
        points,
        campaigns,
        as_of,
        include_next_tiers=include_next_tiers,
        include_other_campaigns=include_other_campaigns,
    )

    logger.debug(
        "Resolved professional %s on %s: points=%s campaign=%s tier=%s next=%s (%s)",
        professional_id,
        as_of,
        points,
        view.campaign.id if view.campaign else None,
        view.current_tier.id if view.current_tier else None,
        view.next_tier.id if view.next_tier else None,
        view.next_tier_origin,
    )
    return view
