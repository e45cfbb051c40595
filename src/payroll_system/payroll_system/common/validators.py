from __future__ import annotations

import math
from typing import Optional

from ..core.constants import MONEY_DECIMALS
from ..core.exceptions import InvalidAmountError, ValidationError


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_non_negative(value, field_name: str) -> float:
    """Coerce a monetary input to float and reject negatives, NaN and infinity."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidAmountError(f"{field_name} must be a number") from None
    if not math.isfinite(number) or number < 0:
        raise InvalidAmountError(f"{field_name} must be a non-negative number")
    return number


def require_money(value, field_name: str) -> float:
    """Non-negative amount rounded to cents, the precision money columns store."""
    return round(require_non_negative(value, field_name), MONEY_DECIMALS)
