"""
Calendar arithmetic over unix timestamps (UTC, seconds).

Month and year arithmetic clamps the day of month instead of rolling over:
Jan 31 + 1 month is Feb 28 (or 29), never Mar 3.
"""

from __future__ import annotations

import calendar as _stdcal
from datetime import date

from ..errors import CalendarError


SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600
SECONDS_PER_MINUTE = 60

_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()


def _require_timestamp(ts: int, *, name: str = "timestamp") -> None:
    if not isinstance(ts, int) or isinstance(ts, bool) or ts < 0:
        raise CalendarError(f"{name} must be a non-negative int, got {ts!r}")


def _date_of(ts: int) -> date:
    _require_timestamp(ts)
    return date.fromordinal(_EPOCH_ORDINAL + ts // SECONDS_PER_DAY)


def _timestamp_of(d: date, seconds_of_day: int = 0) -> int:
    return (d.toordinal() - _EPOCH_ORDINAL) * SECONDS_PER_DAY + seconds_of_day


def is_leap_year(year: int) -> bool:
    return _stdcal.isleap(year)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise CalendarError(f"month must be in [1, 12]: {month}")
    return _stdcal.monthrange(year, month)[1]


def is_valid_date(year: int, month: int, day: int) -> bool:
    if year < 1970 or not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def timestamp_from_date(year: int, month: int, day: int) -> int:
    if not is_valid_date(year, month, day):
        raise CalendarError(f"invalid date: {year:04d}-{month:02d}-{day:02d}")
    return _timestamp_of(date(year, month, day))


def timestamp_from_datetime(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise CalendarError(f"invalid time: {hour:02d}:{minute:02d}:{second:02d}")
    return (
        timestamp_from_date(year, month, day)
        + hour * SECONDS_PER_HOUR
        + minute * SECONDS_PER_MINUTE
        + second
    )


def timestamp_to_date(ts: int) -> tuple[int, int, int]:
    d = _date_of(ts)
    return d.year, d.month, d.day


def timestamp_to_datetime(ts: int) -> tuple[int, int, int, int, int, int]:
    year, month, day = timestamp_to_date(ts)
    secs = ts % SECONDS_PER_DAY
    return (
        year,
        month,
        day,
        secs // SECONDS_PER_HOUR,
        (secs % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
        secs % SECONDS_PER_MINUTE,
    )


def day_of_week(ts: int) -> int:
    """1 = Monday ... 7 = Sunday."""
    return _date_of(ts).isoweekday()


def _shift_months(ts: int, months: int) -> int:
    d = _date_of(ts)
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if year < 1970:
        raise CalendarError("result precedes the unix epoch")
    day = min(d.day, days_in_month(year, month))
    return _timestamp_of(date(year, month, day), ts % SECONDS_PER_DAY)


def add_days(ts: int, days: int) -> int:
    _require_timestamp(ts)
    return ts + days * SECONDS_PER_DAY


def sub_days(ts: int, days: int) -> int:
    out = ts - days * SECONDS_PER_DAY
    if out < 0:
        raise CalendarError("result precedes the unix epoch")
    return out


def add_months(ts: int, months: int) -> int:
    return _shift_months(ts, months)


def sub_months(ts: int, months: int) -> int:
    return _shift_months(ts, -months)


def add_years(ts: int, years: int) -> int:
    return _shift_months(ts, 12 * years)


def sub_years(ts: int, years: int) -> int:
    return _shift_months(ts, -12 * years)


def diff_days(from_ts: int, to_ts: int) -> int:
    """Whole days elapsed between two timestamps.

    Raises:
        CalendarError: if `from_ts` is later than `to_ts`.
    """
    _require_timestamp(from_ts, name="from_ts")
    _require_timestamp(to_ts, name="to_ts")
    if from_ts > to_ts:
        raise CalendarError(f"from_ts {from_ts} is after to_ts {to_ts}")
    return (to_ts - from_ts) // SECONDS_PER_DAY


def diff_months(from_ts: int, to_ts: int) -> int:
    """Calendar-month difference, ignoring the day of month."""
    if from_ts > to_ts:
        raise CalendarError(f"from_ts {from_ts} is after to_ts {to_ts}")
    fy, fm, _ = timestamp_to_date(from_ts)
    ty, tm, _ = timestamp_to_date(to_ts)
    return (ty * 12 + tm) - (fy * 12 + fm)


def diff_years(from_ts: int, to_ts: int) -> int:
    """Calendar-year difference, ignoring month and day."""
    if from_ts > to_ts:
        raise CalendarError(f"from_ts {from_ts} is after to_ts {to_ts}")
    return timestamp_to_date(to_ts)[0] - timestamp_to_date(from_ts)[0]
