from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import CurrentUser, ROLE_ADMIN, ROLE_STORE, get_current_user, require_roles
from app.schemas.point_entry import PointEntryCreate, PointEntryHistoryOut, PointEntryOut, PointEntryUpdate
from app.services import points_service


router = APIRouter(prefix="/points", tags=["points"])


@router.get("", response_model=list[PointEntryOut])
def list_point_entries(
    professional_id: int | None = None,
    store_id: int | None = None,
    client_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    campaign_id: int | None = None,
    order_by: str | None = None,
    order_dir: str | None = None,
    limit: int = 10,
    offset: int = 0,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return points_service.list_entries(
        db,
        user,
        professional_id=professional_id,
        store_id=store_id,
        client_id=client_id,
        date_from=date_from,
        date_to=date_to,
        campaign_id=campaign_id,
        order_by=order_by,
        order_dir=order_dir,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=PointEntryOut)
def register_point_entry(
    payload: PointEntryCreate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN, ROLE_STORE)),
    db: Session = Depends(get_db),
):
    entry = points_service.register_entry(db, user, **payload.model_dump())
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/{entry_id}", response_model=PointEntryOut)
def get_point_entry(
    entry_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = points_service.get_entry(db, entry_id)
    points_service.ensure_can_view(user, entry)
    return entry


@router.patch("/{entry_id}", response_model=PointEntryOut)
def update_point_entry(
    entry_id: int,
    payload: PointEntryUpdate,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN, ROLE_STORE)),
    db: Session = Depends(get_db),
):
    entry = points_service.update_entry(db, user, entry_id, **payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(entry)
    return entry


@router.delete("/{entry_id}")
def delete_point_entry(
    entry_id: int,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN, ROLE_STORE)),
    db: Session = Depends(get_db),
):
    points_service.delete_entry(db, user, entry_id)
    db.commit()
    return {"deleted": True}


@router.get("/{entry_id}/history", response_model=list[PointEntryHistoryOut])
def list_point_entry_history(
    entry_id: int,
    user: CurrentUser = Depends(require_roles(ROLE_ADMIN, ROLE_STORE)),
    db: Session = Depends(get_db),
):
    entry = points_service.get_entry(db, entry_id)
    points_service.ensure_can_view(user, entry)
    return points_service.list_history(db, entry.id)
