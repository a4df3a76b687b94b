import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.deps.auth import CurrentUser, ROLE_ADMIN, ROLE_PROFESSIONAL, ROLE_STORE
from app.models.campaign import Campaign
from app.models.point_entry import PointEntry
from app.models.point_entry_history import PointEntryHistory


logger = logging.getLogger(__name__)

STATUS_ACTIVE = "ACTIVE"
STATUS_DELETED = "DELETED"

_ORDERABLE = {
    "id": PointEntry.id,
    "reference_date": PointEntry.reference_date,
    "value": PointEntry.value,
    "created_at": PointEntry.created_at,
    "updated_at": PointEntry.updated_at,
}

MAX_PAGE_SIZE = 100


def _utcnow() -> datetime:
    # naive UTC, matching the TIMESTAMP columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def year_range(as_of: date) -> tuple[date, date]:
    return date(as_of.year, 1, 1), date(as_of.year, 12, 31)


# ============================================================
# AGGREGATION
# ============================================================

def total_points(db: Session, professional_id: int, as_of: date) -> float:
    """
    Sum of the professional's active entries whose reference date falls in the
    calendar year of ``as_of``. Unknown professionals simply have 0 points.
    """
    start, end = year_range(as_of)

    total = (
        db.query(func.coalesce(func.sum(PointEntry.value), 0))
        .filter(
            PointEntry.professional_id == professional_id,
            PointEntry.status == STATUS_ACTIVE,
            PointEntry.reference_date >= start,
            PointEntry.reference_date <= end,
        )
        .scalar()
    )

    return float(total or 0)


# ============================================================
# REGISTER / EDIT / DELETE
# ============================================================

def _ensure_can_modify(user: CurrentUser, entry: PointEntry):
    if user.role == ROLE_ADMIN:
        return
    if user.role == ROLE_STORE and entry.registrant_id == user.id:
        return
    logger.warning("User %s (%s) may not modify point entry %s", user.id, user.role, entry.id)
    raise HTTPException(status_code=403, detail="Not allowed to modify an entry registered by another user")


def ensure_can_view(user: CurrentUser, entry: PointEntry):
    """
    Admins see every entry; store users the ones they registered or that belong
    to their store; professionals only their own (others look missing).
    """
    if user.role == ROLE_ADMIN:
        return
    if user.role == ROLE_PROFESSIONAL:
        if entry.professional_id != user.id:
            raise HTTPException(status_code=404, detail="Point entry not found")
        return
    if user.role == ROLE_STORE:
        if entry.registrant_id == user.id:
            return
        if user.store_id and entry.store_id == user.store_id:
            return
    logger.warning("User %s (%s) may not view point entry %s", user.id, user.role, entry.id)
    raise HTTPException(status_code=403, detail="Not allowed to view this entry")


def register_entry(
    db: Session,
    user: CurrentUser,
    *,
    professional_id: int,
    value: Decimal,
    reference_date: date,
    client_id: int | None = None,
    store_id: int | None = None,
    quote: str | None = None,
) -> PointEntry:
    if user.role == ROLE_ADMIN:
        if not store_id:
            raise HTTPException(status_code=400, detail="store_id is required for administrators")
    elif user.role == ROLE_STORE:
        if not user.store_id:
            raise HTTPException(status_code=400, detail="Store user without a linked store")
        store_id = user.store_id
    else:
        raise HTTPException(status_code=403, detail="Role not allowed to register points")

    if value is None or Decimal(str(value)) <= 0:
        raise HTTPException(status_code=400, detail="value must be greater than zero")

    now = _utcnow()
    entry = PointEntry(
        professional_id=professional_id,
        store_id=store_id,
        registrant_id=user.id,
        client_id=client_id,
        value=value,
        quote=quote,
        reference_date=reference_date,
        status=STATUS_ACTIVE,
        created_at=now,
        updated_at=now,
    )
    db.add(entry)
    db.flush()

    logger.info(
        "Point entry %s registered by %s: professional=%s store=%s value=%s reference_date=%s",
        entry.id, user.id, professional_id, store_id, value, reference_date,
    )
    return entry


def get_entry(db: Session, entry_id: int) -> PointEntry:
    entry = (
        db.query(PointEntry)
        .filter(PointEntry.id == entry_id)
        .filter(PointEntry.status == STATUS_ACTIVE)
        .first()
    )
    if not entry:
        raise HTTPException(status_code=404, detail="Point entry not found")
    return entry


def update_entry(
    db: Session,
    user: CurrentUser,
    entry_id: int,
    *,
    value: Decimal | None = None,
    reference_date: date | None = None,
    client_id: int | None = None,
    quote: str | None = None,
) -> PointEntry:
    entry = get_entry(db, entry_id)
    _ensure_can_modify(user, entry)

    if value is not None and Decimal(str(value)) <= 0:
        raise HTTPException(status_code=400, detail="value must be greater than zero")

    new_value = value if value is not None else entry.value
    new_reference_date = reference_date or entry.reference_date

    # history only tracks the fields that move points around
    if Decimal(str(new_value)) != Decimal(str(entry.value)) or new_reference_date != entry.reference_date:
        db.add(
            PointEntryHistory(
                point_entry_id=entry.id,
                changed_by=user.id,
                previous_value=entry.value,
                new_value=new_value,
                previous_reference_date=entry.reference_date,
                new_reference_date=new_reference_date,
                changed_at=_utcnow(),
            )
        )
        logger.info(
            "Point entry %s edited by %s: value %s -> %s, reference_date %s -> %s",
            entry.id, user.id, entry.value, new_value, entry.reference_date, new_reference_date,
        )

    entry.value = new_value
    entry.reference_date = new_reference_date
    if client_id is not None:
        entry.client_id = client_id
    if quote is not None:
        entry.quote = quote
    entry.updated_at = _utcnow()

    db.flush()
    return entry


def delete_entry(db: Session, user: CurrentUser, entry_id: int) -> PointEntry:
    entry = get_entry(db, entry_id)
    _ensure_can_modify(user, entry)

    entry.status = STATUS_DELETED
    entry.updated_at = _utcnow()
    db.flush()

    logger.info("Point entry %s deleted by %s", entry.id, user.id)
    return entry


def list_history(db: Session, entry_id: int) -> list[PointEntryHistory]:
    return (
        db.query(PointEntryHistory)
        .filter(PointEntryHistory.point_entry_id == entry_id)
        .order_by(PointEntryHistory.changed_at.asc(), PointEntryHistory.id.asc())
        .all()
    )


# ============================================================
# LISTING
# ============================================================

def resolve_order(order_by: str | None, order_dir: str | None):
    """
    Map a requested ordering onto a whitelisted column.

    A ``-column`` prefix means descending when no explicit direction is given;
    anything unknown falls back to ``created_at`` descending.
    """
    direction = (order_dir or "").strip().lower()
    direction = direction if direction in ("asc", "desc") else None

    column = (order_by or "").strip().lower()
    if column.startswith("-"):
        column = column.lstrip("-")
        direction = direction or "desc"

    if column not in _ORDERABLE:
        column = "created_at"

    return column, direction or "desc"


def list_entries(
    db: Session,
    user: CurrentUser,
    *,
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
) -> list[PointEntry]:
    q = db.query(PointEntry).filter(PointEntry.status == STATUS_ACTIVE)

    if user.role == ROLE_PROFESSIONAL:
        q = q.filter(PointEntry.professional_id == user.id)
    elif user.role == ROLE_STORE:
        scope = PointEntry.registrant_id == user.id
        if user.store_id:
            scope = scope | (PointEntry.store_id == user.store_id)
        q = q.filter(scope)

    if professional_id and user.role != ROLE_PROFESSIONAL:
        q = q.filter(PointEntry.professional_id == professional_id)
    if store_id:
        q = q.filter(PointEntry.store_id == store_id)
    if client_id:
        q = q.filter(PointEntry.client_id == client_id)

    if date_from:
        q = q.filter(PointEntry.reference_date >= date_from)
    if date_to:
        q = q.filter(PointEntry.reference_date <= date_to)

    if campaign_id:
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if campaign:
            q = q.filter(PointEntry.reference_date >= campaign.start_date)
            if campaign.end_date:
                q = q.filter(PointEntry.reference_date <= campaign.end_date)

    column, direction = resolve_order(order_by, order_dir)
    col = _ORDERABLE[column]
    q = q.order_by(col.asc() if direction == "asc" else col.desc())
    if column != "id":
        q = q.order_by(PointEntry.id.desc())

    limit = max(1, min(MAX_PAGE_SIZE, int(limit or 10)))
    return q.offset(max(0, int(offset or 0))).limit(limit).all()
