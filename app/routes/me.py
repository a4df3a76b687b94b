import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import CurrentUser, ROLE_PROFESSIONAL, get_current_user
from app.schemas.campaign import CampaignOut
from app.schemas.tier_resolution import build_resolution_out
from app.services.campaign_catalog import active_campaigns
from app.services.tier_resolver import local_today, resolve


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/rewards")
def read_my_rewards(
    as_of: date | None = None,
    include_next_tiers: bool = True,
    include_other_campaigns: bool = True,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if user.role == ROLE_PROFESSIONAL:
        try:
            view = resolve(
                db,
                user.id,
                as_of=as_of,
                include_next_tiers=include_next_tiers,
                include_other_campaigns=include_other_campaigns,
            )
        except SQLAlchemyError:
            logger.exception("Tier resolution failed for professional %s", user.id)
            raise HTTPException(status_code=503, detail="Resolution failed")
        return {
            "success": True,
            "message": "Professional rewards",
            "data": build_resolution_out(view).model_dump(mode="json"),
        }

    # other roles get the campaigns running on the day, without any points context
    campaigns = active_campaigns(db, as_of or local_today())
    return {
        "success": True,
        "message": "Active campaigns",
        "data": [CampaignOut.model_validate(c).model_dump(mode="json") for c in campaigns],
    }
