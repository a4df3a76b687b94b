from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, computed_field

from app.services.formatting import format_date_br, format_money


class PointEntryCreate(BaseModel):
    professional_id: int
    client_id: Optional[int] = None
    # required for administrators, taken from the caller for store users
    store_id: Optional[int] = None

    value: Decimal
    reference_date: date
    quote: Optional[str] = None


class PointEntryUpdate(BaseModel):
    value: Optional[Decimal] = None
    reference_date: Optional[date] = None
    client_id: Optional[int] = None
    quote: Optional[str] = None


class PointEntryOut(BaseModel):
    id: int
    professional_id: int
    store_id: Optional[int] = None
    registrant_id: int
    client_id: Optional[int] = None

    value: Decimal
    quote: Optional[str] = None
    reference_date: date

    status: str

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def value_formatted(self) -> str:
        return format_money(self.value)

    @computed_field
    @property
    def reference_date_display(self) -> str:
        return format_date_br(self.reference_date)

    class Config:
        from_attributes = True


class PointEntryHistoryOut(BaseModel):
    id: int
    point_entry_id: int
    changed_by: int

    previous_value: Optional[Decimal] = None
    new_value: Optional[Decimal] = None
    previous_reference_date: Optional[date] = None
    new_reference_date: Optional[date] = None

    changed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
