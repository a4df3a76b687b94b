from datetime import date

from sqlalchemy import case
from sqlalchemy.orm import Session, selectinload

from app.models.campaign import Campaign


STATUS_ACTIVE = "ACTIVE"


def is_active_on(campaign, day: date) -> bool:
    if campaign.status != STATUS_ACTIVE:
        return False
    if campaign.start_date is None or campaign.start_date > day:
        return False
    return campaign.end_date is None or campaign.end_date >= day


def active_on_filter(q, day: date):
    return q.filter(
        Campaign.status == STATUS_ACTIVE,
        Campaign.start_date <= day,
        (Campaign.end_date.is_(None)) | (Campaign.end_date >= day),
    )


def campaign_order_key(campaign):
    """Ending soonest first, open-ended last; then start date, then id."""
    return (
        campaign.end_date is None,
        campaign.end_date or date.max,
        campaign.start_date or date.min,
        campaign.id or 0,
    )


def _ordered(q):
    return q.order_by(
        case((Campaign.end_date.is_(None), 1), else_=0).asc(),
        Campaign.end_date.asc(),
        Campaign.start_date.asc(),
        Campaign.id.asc(),
    )


def active_campaigns(db: Session, as_of: date) -> list[Campaign]:
    q = active_on_filter(db.query(Campaign), as_of).options(selectinload(Campaign.tiers))
    return _ordered(q).all()


def active_campaigns_with_tiers(db: Session, as_of: date) -> list[Campaign]:
    """
    Campaigns active on ``as_of`` that declare at least one tier, tiers loaded
    ascending by minimum points. Flat-target campaigns (no tiers) are left out.
    """
    q = (
        active_on_filter(db.query(Campaign), as_of)
        .filter(Campaign.tiers.any())
        .options(selectinload(Campaign.tiers))
    )
    return _ordered(q).all()
