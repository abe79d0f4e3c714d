"""Display formatting shared by the order panel"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

import pytz

NOT_AVAILABLE = "N/A"


def format_date(value: Optional[datetime], tz_name: str) -> str:
    """e.g. "Mon, Jan 5, 2026, 3:04 PM" in the display timezone"""
    if value is None:
        return NOT_AVAILABLE
    local = value.astimezone(pytz.timezone(tz_name))
    hour = local.hour % 12 or 12
    return f"{local:%a}, {local:%b} {local.day}, {local.year}, {hour}:{local:%M} {local:%p}"


def format_money(value: Union[Decimal, float, int]) -> str:
    return f"${Decimal(str(value)):.2f}"
