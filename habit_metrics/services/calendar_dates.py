"""Local-calendar date arithmetic.

Every date in the engine is a zero-padded ``YYYY-MM-DD`` string in the
user's local timezone. Strings are parsed into naive ``datetime.date``
values (local midnight), never through a UTC timestamp, so no day shift can
happen near a timezone boundary. Zero padding means plain string comparison
orders dates correctly.

Malformed strings never raise: helpers log a warning and return the input
unchanged or an empty result.
"""

import calendar
import logging
import re
from datetime import date, datetime, timedelta
from typing import List, NamedTuple, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# 0 = Sunday, 1 = Monday
DEFAULT_WEEK_STARTS_ON = 1

SHORT_DAY_LABELS = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateSpan(NamedTuple):
    """Inclusive span of dates with a short display label."""

    start: str
    end: str
    label: str


class MonthRange(NamedTuple):
    start: str
    end: str
    label: str
    month_key: str


def to_local_date_string(value: Union[date, datetime]) -> str:
    """Format a date (or the local date of a datetime) as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD string into a local date, or None if malformed."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_or_warn(value: str, operation: str) -> Optional[date]:
    parsed = parse_date(value)
    if parsed is None:
        logger.warning("Malformed date %r passed to %s", value, operation)
    return parsed


def today() -> str:
    """Current local date as YYYY-MM-DD."""
    return to_local_date_string(date.today())


def normalize_date(value: Union[str, date, datetime]) -> str:
    """Normalize a date-like value to YYYY-MM-DD.

    Strings that are already valid pass through; anything unparseable is
    returned unchanged.
    """
    if isinstance(value, (date, datetime)):
        return to_local_date_string(value)
    parsed = _parse_or_warn(value, "normalize_date")
    return to_local_date_string(parsed) if parsed else value


def add_days(date_str: str, n: int) -> str:
    """Shift a date by ``n`` days (negative moves backward)."""
    parsed = _parse_or_warn(date_str, "add_days")
    if parsed is None:
        return date_str
    try:
        return to_local_date_string(parsed + timedelta(days=n))
    except OverflowError:
        logger.warning("add_days(%s, %s) out of calendar range", date_str, n)
        return date_str


def add_months(date_str: str, n: int) -> str:
    """Shift a date by ``n`` calendar months.

    Keeps the day of month when the target month has it, otherwise clamps
    to the target month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    parsed = _parse_or_warn(date_str, "add_months")
    if parsed is None:
        return date_str
    month_index = parsed.year * 12 + (parsed.month - 1) + n
    year, month = divmod(month_index, 12)
    month += 1
    if not 1 <= year <= 9999:
        return date_str
    day = min(parsed.day, calendar.monthrange(year, month)[1])
    return to_local_date_string(date(year, month, day))


def get_month_key(date_str: str) -> str:
    """YYYY-MM for the month containing the date."""
    return date_str[:7]


def is_today(date_str: str, today_str: Optional[str] = None) -> bool:
    return date_str == (today_str or today())


def is_future(date_str: str, today_str: Optional[str] = None) -> bool:
    return date_str > (today_str or today())


def is_past(date_str: str, today_str: Optional[str] = None) -> bool:
    return date_str < (today_str or today())


def format_date_title(date_str: str, today_str: Optional[str] = None) -> str:
    """Human title for a date: "Today", "Yesterday", else "October 18"."""
    current = today_str or today()
    if date_str == current:
        return "Today"
    if date_str == add_days(current, -1):
        return "Yesterday"
    parsed = parse_date(date_str)
    if parsed is None:
        return date_str
    return f"{_MONTH_NAMES[parsed.month - 1]} {parsed.day}"


def get_day_of_month(date_str: str) -> int:
    parsed = parse_date(date_str)
    return parsed.day if parsed else 0


def get_day_of_week_index(date_str: str) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    parsed = parse_date(date_str)
    if parsed is None:
        return 0
    return (parsed.weekday() + 1) % 7


def get_week_dates(anchor: str, week_starts_on: int = DEFAULT_WEEK_STARTS_ON) -> List[str]:
    """The 7 dates of the week containing ``anchor``, in ascending order.

    Args:
        anchor: Any date inside the wanted week.
        week_starts_on: 0 for weeks starting Sunday, 1 for Monday.

    Returns:
        Seven YYYY-MM-DD strings, or an empty list for a malformed anchor.
    """
    parsed = _parse_or_warn(anchor, "get_week_dates")
    if parsed is None:
        return []
    sunday_index = (parsed.weekday() + 1) % 7
    offset = (sunday_index - week_starts_on) % 7
    try:
        start = parsed - timedelta(days=offset)
        return [to_local_date_string(start + timedelta(days=i)) for i in range(7)]
    except OverflowError:
        return []


def get_week_range(
    date_str: str, week_starts_on: int = DEFAULT_WEEK_STARTS_ON
) -> Tuple[str, str]:
    """Inclusive (start, end) of the week containing the date."""
    days = get_week_dates(date_str, week_starts_on)
    if not days:
        return date_str, date_str
    return days[0], days[-1]


def get_month_range(date_str: str) -> Tuple[str, str]:
    """Inclusive (start, end) of the calendar month containing the date."""
    parsed = _parse_or_warn(date_str, "get_month_range")
    if parsed is None:
        return date_str, date_str
    last_day = calendar.monthrange(parsed.year, parsed.month)[1]
    return (
        to_local_date_string(parsed.replace(day=1)),
        to_local_date_string(parsed.replace(day=last_day)),
    )


def dates_in_range(from_date: str, to_date: str) -> List[str]:
    """Every date in the inclusive range [from_date, to_date], in order."""
    start = _parse_or_warn(from_date, "dates_in_range")
    end = _parse_or_warn(to_date, "dates_in_range")
    if start is None or end is None or start > end:
        return []
    return [
        to_local_date_string(start + timedelta(days=i))
        for i in range((end - start).days + 1)
    ]


def get_last_n_month_ranges(end_date: str, n: int) -> List[MonthRange]:
    """The last ``n`` calendar months ending with the month of ``end_date``.

    Oldest month first; labels are short month names ("Sep").
    """
    parsed = _parse_or_warn(end_date, "get_last_n_month_ranges")
    if parsed is None or n <= 0:
        return []
    ranges: List[MonthRange] = []
    anchor = to_local_date_string(parsed.replace(day=1))
    for i in range(n - 1, -1, -1):
        month_start = add_months(anchor, -i)
        start, end = get_month_range(month_start)
        month = int(start[5:7])
        ranges.append(
            MonthRange(
                start=start,
                end=end,
                label=_MONTH_NAMES[month - 1][:3],
                month_key=get_month_key(start),
            )
        )
    return ranges


def get_month_week_segments(month_start: str) -> List[DateSpan]:
    """Seven-day segments of a calendar month: 1-7, 8-14, 15-21, 22-28, 29-end."""
    parsed = _parse_or_warn(month_start, "get_month_week_segments")
    if parsed is None:
        return []
    last_day = calendar.monthrange(parsed.year, parsed.month)[1]
    month_name = _MONTH_NAMES[parsed.month - 1][:3]
    segments: List[DateSpan] = []
    for first in range(1, last_day + 1, 7):
        last = min(first + 6, last_day)
        segments.append(
            DateSpan(
                start=to_local_date_string(parsed.replace(day=first)),
                end=to_local_date_string(parsed.replace(day=last)),
                label=f"{month_name} {first}-{last}",
            )
        )
    return segments
