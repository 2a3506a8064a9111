from datetime import date, datetime
from typing import Optional

_BLANKS = {"", "null", "none", "undefined"}


def _is_blank(v) -> bool:
    return v is None or (isinstance(v, str) and v.strip().lower() in _BLANKS)


def to_int(v) -> Optional[int]:
    if _is_blank(v) or isinstance(v, bool):
        return None
    try:
        return int(float(v))
    except (TypeError, ValueError, OverflowError):
        return None


def to_float(v) -> Optional[float]:
    if _is_blank(v) or isinstance(v, bool):
        return None
    try:
        result = float(v)
    except (TypeError, ValueError):
        return None
    if result != result:  # NaN
        return None
    return result


def to_optional_str(v) -> Optional[str]:
    if _is_blank(v):
        return None
    return str(v).strip()


def to_str(v) -> str:
    return "" if v is None else str(v)


def to_date(v) -> Optional[date]:
    """Parse provider dates; accepts ``YYYY-MM-DD`` and full ISO timestamps."""
    if _is_blank(v):
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    text = str(v).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def to_str_list(v) -> list[str]:
    if _is_blank(v):
        return []
    if isinstance(v, str):
        return [v.strip()] if v.strip() else []
    return [str(item).strip() for item in v if not _is_blank(item)]
