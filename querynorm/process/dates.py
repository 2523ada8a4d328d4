"""
Calendar helpers for date-range presets, bound parsing and daily buckets.

All of these are pure functions of their arguments; the only implicit input
is the clock, and every function that reads it accepts ``now`` so that it can
be pinned.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterator, Optional, Tuple, Union

import dateutil.parser
import pytz
from dateutil.relativedelta import relativedelta

from querynorm import consts

DateLike = Union[str, date, datetime]

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(weeks=1)


def today(now: Optional[datetime] = None,
          tz: Optional[tzinfo] = None) -> date:
    """Get the current calendar date in ``tz`` (UTC if not given)."""
    if now is None:
        now = datetime.now(tz=tz or pytz.utc)
    return now.date()


def resolve_date_preset(name: Optional[str], now: Optional[datetime] = None,
                        tz: Optional[tzinfo] = None) -> Tuple[date, date]:
    """
    Compute the inclusive ``(start, end)`` dates for a named range preset.

    =============== ============================ ========================
    preset          start                        end
    =============== ============================ ========================
    today           today                        today
    yesterday       yesterday                    yesterday
    this-month      first day of this month      today
    last-month      first day of last month      last day of last month
    last-2-months   first day, 2 months ago      last day of last month
    last-3-months   first day, 3 months ago      last day of last month
    (anything else) 7 days ago                   yesterday
    =============== ============================ ========================

    Parameters
    ----------
    name : str
        Name of the preset. Unknown names resolve to the last seven days.
    now : :class:`datetime`
        The current time. Defaults to the system clock.
    tz : :class:`datetime.tzinfo`
        Timezone used to read the system clock when ``now`` is not given.

    Returns
    -------
    tuple
        Start and end :class:`date`.

    """
    current = today(now, tz)
    yesterday = current - ONE_DAY
    first_of_month = current.replace(day=1)
    end_of_last_month = first_of_month - ONE_DAY

    if name == "today":
        return current, current
    if name == "yesterday":
        return yesterday, yesterday
    if name == "this-month":
        return first_of_month, current
    if name == "last-month":
        return first_of_month - relativedelta(months=1), end_of_last_month
    if name == "last-2-months":
        return first_of_month - relativedelta(months=2), end_of_last_month
    if name == "last-3-months":
        return first_of_month - relativedelta(months=3), end_of_last_month
    return current - ONE_WEEK, yesterday


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        parsed = dateutil.parser.parse(str(value))
    except OverflowError as ex:
        raise ValueError(f"Date out of range: {value}") from ex
    # Bounds are wall-clock times; the zone travels separately as time_zone.
    return parsed.replace(tzinfo=None)


def start_of_day(value: DateLike) -> datetime:
    """
    Parse ``value`` and move it to the first instant of its day.

    Raises
    ------
    ValueError
        Raised if ``value`` cannot be parsed as a date.

    """
    return _to_datetime(value).replace(hour=0, minute=0, second=0,
                                       microsecond=0)


def end_of_day(value: DateLike) -> datetime:
    """
    Parse ``value`` and move it to the last instant of its day.

    Raises
    ------
    ValueError
        Raised if ``value`` cannot be parsed as a date.

    """
    return _to_datetime(value).replace(hour=23, minute=59, second=59,
                                       microsecond=999999)


def fallback_start(now: Optional[datetime] = None,
                   tz: Optional[tzinfo] = None) -> date:
    """Start date used in place of one that could not be parsed."""
    return today(now, tz) - ONE_WEEK


def fallback_end(now: Optional[datetime] = None,
                 tz: Optional[tzinfo] = None) -> date:
    """End date used in place of one that could not be parsed."""
    return today(now, tz) - ONE_DAY


def format_bound(value: datetime) -> str:
    """Render a range bound the way the search index expects it."""
    return value.strftime(consts.DATETIME_FORMAT)


def build_daily_buckets(start: DateLike, end: DateLike
                        ) -> Iterator[Dict[str, datetime]]:
    """
    Split an inclusive date interval into consecutive 24-hour buckets.

    The first bucket begins at the start of the day of ``start``; buckets
    continue until one begins after the end of the day of ``end``. The
    ``to`` of each bucket is the ``from`` of the next.

    Parameters
    ----------
    start : str or :class:`date`
    end : str or :class:`date`

    Returns
    -------
    iterator
        Yields ``{"from": datetime, "to": datetime}`` dicts. Yields nothing
        if either bound cannot be parsed.

    """
    try:
        lower = start_of_day(start)
        upper = end_of_day(end)
    except ValueError:
        return
    while lower <= upper:
        upper_bound = lower + ONE_DAY
        yield {"from": lower, "to": upper_bound}
        lower = upper_bound
