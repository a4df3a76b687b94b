"""
Display helpers for the pt-BR presentation of points, money and dates.

All helpers are pure functions of the raw value: "." as thousands separator,
"," as decimal separator, dd/mm/YYYY dates.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP


def _quantize(value, places: int) -> Decimal:
    exp = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP)


def round_half_away(value) -> int:
    # Decimal's ROUND_HALF_UP rounds ties away from zero (-2.5 -> -3)
    return int(_quantize(value, 0))


def format_number_br(value, places: int = 0) -> str:
    q = _quantize(value, places)
    text = f"{q:,.{places}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_points(value) -> str | None:
    if value is None:
        return None
    return format_number_br(value, 0)


def format_money(value) -> str | None:
    if value is None:
        return None
    return format_number_br(value, 2)


def points_range_text(min_points, max_points) -> str:
    min_f = format_number_br(min_points or 0, 0)
    if max_points is None:
        return f"a partir de {min_f}"
    return f"{min_f} a {format_number_br(max_points, 0)}"


def companion_text(companion_allowed) -> str:
    return "Com acompanhante" if companion_allowed else "Somente profissional"


def format_date_br(value: date | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%d/%m/%Y")


def period_text(start: date | None, end: date | None) -> str | None:
    start_f = format_date_br(start)
    end_f = format_date_br(end)
    if start_f and end_f:
        return f"{start_f} até {end_f}"
    return None
