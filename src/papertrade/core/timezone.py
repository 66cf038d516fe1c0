"""US/Eastern market time: trade timestamps, market dates and filter bounds."""

from datetime import date, datetime, time

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Current time in US/Eastern; the default clock for trades."""
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Express ``dt`` in US/Eastern."""
    if dt.tzinfo is None:
        # Naive values are Eastern wall-clock time
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def to_storage(dt: datetime) -> datetime:
    """Naive UTC value for a DateTime column."""
    return to_eastern(dt).astimezone(pytz.utc).replace(tzinfo=None)


def from_storage(dt: datetime) -> datetime:
    """US/Eastern value for a naive UTC timestamp read back from the store."""
    return pytz.utc.localize(dt).astimezone(EASTERN_TZ)


def market_date(dt: datetime) -> date:
    """Calendar date of ``dt`` in US/Eastern."""
    return to_eastern(dt).date()


def _is_date_only(value: str) -> bool:
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def parse_datetime_eastern(value: str, end_of_day: bool = False) -> datetime:
    """
    Parse a datetime string into US/Eastern, assuming Eastern when no zone is given.

    With ``end_of_day``, a bare date such as ``2024-03-09`` resolves to the
    last instant of that day, so it works as an inclusive upper bound.
    """
    dt = date_parser.parse(value)
    if end_of_day and _is_date_only(value):
        dt = datetime.combine(dt.date(), time.max)
    return to_eastern(dt)
