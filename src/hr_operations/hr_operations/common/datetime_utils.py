from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_ORG_TIMEZONE
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def get_zone(name: Optional[str] = None) -> ZoneInfo:
    """Resolve the organization time zone, falling back to the default."""
    try:
        return ZoneInfo(name or DEFAULT_ORG_TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown time zone %r, using %s", name, DEFAULT_ORG_TIMEZONE)
        return ZoneInfo(DEFAULT_ORG_TIMEZONE)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def parse_hhmm(value: str, field_name: str = "time") -> time:
    v = (value or "").strip()
    m = _HHMM.match(v)
    if not m:
        raise ValidationError(f"{field_name} must be in HH:mm format (e.g. 09:00)")
    return time(int(m.group(1)), int(m.group(2)))


def parse_timestamp(value: Optional[str], tz: ZoneInfo) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as org-local time."""
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"Invalid timestamp {value!r}")
    return ensure_aware(parsed, tz)


def ensure_aware(value: datetime, tz: ZoneInfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def local_date(value: datetime, tz: ZoneInfo) -> date:
    """Calendar day of an instant in the organization zone (not UTC)."""
    return ensure_aware(value, tz).astimezone(tz).date()


def to_utc_naive(value: Optional[datetime], tz: ZoneInfo) -> Optional[datetime]:
    """Storage form for DATETIME columns."""
    if value is None:
        return None
    return ensure_aware(value, tz).astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def day_of_week(d: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return d.isoweekday() % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True)
class Clock:
    """Source of "now" in the organization zone.

    Services read it once per request so that "today" cannot flap mid-computation.
    Wrapped so tests can inject a fixed instant.
    """

    tz: ZoneInfo = field(default_factory=get_zone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()
