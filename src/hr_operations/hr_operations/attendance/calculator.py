from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_ROUNDING_INTERVAL_MINUTES


@dataclass(frozen=True)
class RoundingPolicy:
    enabled: bool = True
    interval_minutes: int = DEFAULT_ROUNDING_INTERVAL_MINUTES


def round_to_nearest(value: float, interval: int) -> int:
    # Half rounds up (x.5 -> next interval), not to even.
    return int(math.floor(value / interval + 0.5)) * interval


def calculate_work_duration(
    clock_in: Optional[datetime],
    clock_out: Optional[datetime],
    policy: RoundingPolicy,
) -> Optional[int]:
    """Worked minutes between two punches, or None while either is missing."""
    if clock_in is None or clock_out is None:
        return None

    minutes = (clock_out - clock_in).total_seconds() / 60
    if policy.enabled and policy.interval_minutes > 0:
        minutes = round_to_nearest(minutes, policy.interval_minutes)
    return max(0, int(minutes))
