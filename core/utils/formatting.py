from datetime import date, datetime
from typing import Any, Optional


def star_bar(rating: Optional[int], maximum: int = 5) -> str:
    """
    Renders a rating as filled and empty stars.
    3 -> '⭐⭐⭐✩✩ (3/5)'
    """
    value = max(0, min(int(rating or 0), maximum))
    return f"{'⭐' * value}{'✩' * (maximum - value)} ({value}/{maximum})"


def yes_no(flag: Any) -> str:
    return "Yes" if flag else "No"


def format_date(val: Any) -> str:
    """
    Formats an ISO date/datetime (string or object) as US short date (M/D/YYYY).
    Returns '' for empty values and the input unchanged if it cannot be parsed.
    """
    if not val:
        return ""

    if isinstance(val, datetime):
        dt = val
    elif isinstance(val, date):
        dt = datetime(val.year, val.month, val.day)
    else:
        val_str = str(val).strip()
        try:
            dt = datetime.fromisoformat(val_str.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = datetime.strptime(val_str.split("T")[0].split(" ")[0], "%Y-%m-%d")
            except ValueError:
                return val_str
    return f"{dt.month}/{dt.day}/{dt.year}"
