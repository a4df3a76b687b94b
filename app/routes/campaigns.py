from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import CurrentUser, ROLE_ADMIN, get_current_user, require_roles
from app.schemas.campaign import CampaignCreate, CampaignOut, CampaignStatusUpdate, CampaignUpdate
from app.schemas.campaign_tier import CampaignTierOut, CampaignTierPrizeUpdate
from app.services import campaign_service
from app.services.campaign_catalog import active_campaigns
from app.services.tier_resolver import local_today


router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("", response_model=list[CampaignOut])
def list_campaigns(
    status: str | None = None,
    title: str | None = None,
    active_on: date | None = None,
    order_by: str | None = None,
    order_dir: str | None = None,
    limit: int = 50,
    offset: int = 0,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return campaign_service.list_campaigns(
        db,
        status=status,
        title=title,
        active_on=active_on,
        order_by=order_by,
        order_dir=order_dir,
        limit=limit,
        offset=offset,
    )


@router.get("/active", response_model=list[CampaignOut])
def list_active_campaigns(
    as_of: date | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return active_campaigns(db, as_of or local_today())


@router.post("", response_model=CampaignOut)
def create_campaign(
    payload: CampaignCreate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    campaign = campaign_service.create_campaign(db, payload.model_dump())
    db.commit()
    db.refresh(campaign)
    return campaign


@router.patch("/tiers/{tier_id}/prize", response_model=CampaignTierOut)
def update_tier_prize(
    tier_id: int,
    payload: CampaignTierPrizeUpdate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    tier = campaign_service.update_tier_prize(db, tier_id, payload.prize_value)
    db.commit()
    db.refresh(tier)
    return tier


@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(
    campaign_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return campaign_service.get_campaign(db, campaign_id)


@router.patch("/{campaign_id}", response_model=CampaignOut)
def update_campaign(
    campaign_id: int,
    payload: CampaignUpdate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    campaign = campaign_service.update_campaign(db, campaign_id, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(campaign)
    return campaign


@router.patch("/{campaign_id}/status", response_model=CampaignOut)
def update_campaign_status(
    campaign_id: int,
    payload: CampaignStatusUpdate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_db),
):
    campaign = campaign_service.set_status(db, campaign_id, payload.status)
    db.commit()
    db.refresh(campaign)
    return campaign
