import logging
from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from app.models.campaign import Campaign
from app.models.campaign_tier import CampaignTier
from app.services.campaign_catalog import active_on_filter


logger = logging.getLogger(__name__)

CAMPAIGN_STATUSES = ("DRAFT", "ACTIVE", "INACTIVE")

_ORDERABLE = {
    "id": Campaign.id,
    "title": Campaign.title,
    "start_date": Campaign.start_date,
    "end_date": Campaign.end_date,
}

_TIER_FIELDS = ("min_points", "max_points", "companion_allowed", "description", "prize_value")


def _tier_data(tier) -> dict:
    if isinstance(tier, dict):
        return dict(tier)
    return tier.model_dump()


def validate_tiers(tiers: list[dict]):
    open_tiers = [t for t in tiers if t.get("max_points") is None]
    if len(open_tiers) > 1:
        raise HTTPException(status_code=400, detail="Only one open tier (max_points=null) is allowed")

    for t in tiers:
        min_p = t.get("min_points")
        max_p = t.get("max_points")
        if min_p is None or int(min_p) < 0:
            raise HTTPException(status_code=400, detail="min_points must be >= 0")
        if max_p is not None and int(max_p) < int(min_p):
            raise HTTPException(status_code=400, detail="max_points must be >= min_points")
        if t.get("prize_value") is not None and t["prize_value"] < 0:
            raise HTTPException(status_code=400, detail="prize_value must be >= 0")

    ordered = sorted(tiers, key=lambda t: int(t["min_points"]))
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.get("max_points") is None:
            raise HTTPException(status_code=400, detail="The open tier must be the highest tier")
        if int(cur["min_points"]) <= int(prev["max_points"]):
            raise HTTPException(status_code=400, detail="Tiers must not overlap")


def validate_period(start_date: date | None, end_date: date | None):
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must be on or after start_date")


_REQUIRED_FIELDS = ("title", "start_date")


def validate_required(data: dict):
    missing = [k for k in _REQUIRED_FIELDS if k in data and data[k] is None]
    if missing:
        raise HTTPException(status_code=400, detail=f"{', '.join(missing)} cannot be null")


def validate_status(status: str) -> str:
    value = (status or "").strip().upper()
    if value not in CAMPAIGN_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of {', '.join(CAMPAIGN_STATUSES)}")
    return value


def sync_tiers(db: Session, campaign: Campaign, tiers: list):
    """
    Upsert the given tiers and drop the campaign's tiers missing from the list.
    Tiers with an id not belonging to the campaign are created as new ones.
    """
    existing = {t.id: t for t in campaign.tiers}
    kept = []

    for payload in tiers:
        data = _tier_data(payload)
        values = {k: data.get(k) for k in _TIER_FIELDS}
        values["companion_allowed"] = bool(values["companion_allowed"])

        tier = existing.get(data.get("id")) if data.get("id") else None
        if tier is None:
            tier = CampaignTier(**values)
        else:
            for k, v in values.items():
                setattr(tier, k, v)
        kept.append(tier)

    # delete-orphan removes the tiers left out
    campaign.tiers = kept
    db.flush()


def create_campaign(db: Session, data: dict) -> Campaign:
    tiers = [_tier_data(t) for t in data.pop("tiers", None) or []]
    validate_period(data.get("start_date"), data.get("end_date"))
    validate_tiers(tiers)
    data["status"] = validate_status(data.get("status") or "ACTIVE")

    campaign = Campaign(**data)
    db.add(campaign)
    db.flush()

    sync_tiers(db, campaign, tiers)

    logger.info("Campaign %s created (%s tiers)", campaign.id, len(tiers))
    return campaign


def get_campaign(db: Session, campaign_id: int) -> Campaign:
    campaign = (
        db.query(Campaign)
        .options(selectinload(Campaign.tiers))
        .filter(Campaign.id == campaign_id)
        .first()
    )
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


def update_campaign(db: Session, campaign_id: int, data: dict) -> Campaign:
    campaign = get_campaign(db, campaign_id)

    tiers = data.pop("tiers", None)
    validate_required(data)
    validate_period(data.get("start_date", campaign.start_date), data.get("end_date", campaign.end_date))

    if tiers is not None:
        tiers = [_tier_data(t) for t in tiers]
        validate_tiers(tiers)

    for k, v in data.items():
        setattr(campaign, k, v)

    if tiers is not None:
        sync_tiers(db, campaign, tiers)

    db.flush()
    logger.info("Campaign %s updated (%s)", campaign.id, ", ".join(sorted(data)) or "tiers")
    return campaign


def set_status(db: Session, campaign_id: int, status: str) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    old_status = campaign.status
    campaign.status = validate_status(status)
    db.flush()

    logger.info("Campaign %s status %s -> %s", campaign.id, old_status, campaign.status)
    return campaign


def update_tier_prize(db: Session, tier_id: int, prize_value) -> CampaignTier:
    tier = db.query(CampaignTier).filter(CampaignTier.id == tier_id).first()
    if not tier:
        raise HTTPException(status_code=404, detail="Tier not found")
    if prize_value is None or prize_value < 0:
        raise HTTPException(status_code=400, detail="prize_value must be >= 0")

    tier.prize_value = prize_value
    db.flush()
    return tier


def list_campaigns(
    db: Session,
    *,
    status: str | None = None,
    title: str | None = None,
    active_on: date | None = None,
    order_by: str | None = None,
    order_dir: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Campaign]:
    q = db.query(Campaign).options(selectinload(Campaign.tiers))

    if status:
        q = q.filter(Campaign.status == validate_status(status))
    if title:
        q = q.filter(Campaign.title.ilike(f"%{title}%"))
    if active_on:
        q = active_on_filter(q, active_on)

    col = _ORDERABLE.get((order_by or "").strip().lower(), Campaign.start_date)
    direction = (order_dir or "desc").strip().lower()
    q = q.order_by(col.asc() if direction == "asc" else col.desc(), Campaign.id.desc())

    limit = max(1, min(200, int(limit or 50)))
    return q.offset(max(0, int(offset or 0))).limit(limit).all()
