from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo
from typing import Optional
import calendar

from schemas.prices import Period, Timespan, FetchWindow
from config import settings


def display_tz() -> ZoneInfo:
    """Return the configured display time zone."""
    return ZoneInfo(settings.DISPLAY_TIME_ZONE)


def shift_months(d: date, months: int) -> date:
    """
    Move `d` by a whole number of months, clamping the day to the target month.

    Examples:
        2024-03-31, -1  -> 2024-02-29
        2023-05-15, -12 -> 2022-05-15

    Args:
        d: Reference date.
        months: Number of months to add (negative to go back).

    Returns:
        Shifted date.
    """
    total = d.year * 12 + (d.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)


def period_window(period: Period, today: Optional[date] = None) -> FetchWindow:
    """
    Resolve the fetch window (date range + bar size) for a chart period.

    Rules:
        - 1D  -> 5-minute bars over the last day
        - 1W  -> hourly bars over the last 7 days
        - 1M, 3M, YTD, 1Y -> daily bars
        - 5Y  -> weekly bars over the last 5 years

    Args:
        period: Selected chart period.
        today: Reference day (defaults to the current local date).

    Returns:
        FetchWindow with inclusive `date_from`/`date_to`.
    """
    today = today or date.today()
    period = Period(period)

    if period == Period.ONE_DAY:
        return FetchWindow(date_from=today - timedelta(days=1), date_to=today,
                           timespan=Timespan.MINUTE, multiplier=5)
    if period == Period.ONE_WEEK:
        return FetchWindow(date_from=today - timedelta(days=7), date_to=today,
                           timespan=Timespan.HOUR)
    if period == Period.ONE_MONTH:
        start = shift_months(today, -1)
    elif period == Period.THREE_MONTHS:
        start = shift_months(today, -3)
    elif period == Period.YEAR_TO_DATE:
        start = today.replace(month=1, day=1)
    elif period == Period.ONE_YEAR:
        start = shift_months(today, -12)
    else:
        return FetchWindow(date_from=shift_months(today, -60), date_to=today,
                           timespan=Timespan.WEEK)
    return FetchWindow(date_from=start, date_to=today, timespan=Timespan.DAY)


def from_epoch_ms(ts: int, tz: Optional[ZoneInfo] = None) -> datetime:
    """Convert epoch milliseconds to an aware datetime in `tz` (display tz by default)."""
    dt = datetime.fromtimestamp(ts / 1000, tz=timezone.utc)
    return dt.astimezone(tz or display_tz())


def axis_label(ts: int, period: Period, tz: Optional[ZoneInfo] = None) -> str:
    """
    Format an x-axis label for a sample timestamp.

    1D: '09:35', 1W: 'Mon 14', 1M/3M/YTD: 'Jan 5', 1Y: 'Jan 24', 5Y: 'Jan 2024'.
    """
    dt = from_epoch_ms(ts, tz)
    if period == Period.ONE_DAY:
        return dt.strftime("%H:%M")
    if period == Period.ONE_WEEK:
        return f"{dt:%a} {dt.day}"
    if period in (Period.ONE_MONTH, Period.THREE_MONTHS, Period.YEAR_TO_DATE):
        return f"{dt:%b} {dt.day}"
    if period == Period.ONE_YEAR:
        return dt.strftime("%b %y")
    return dt.strftime("%b %Y")


def tooltip_title(ts: int, period: Period, tz: Optional[ZoneInfo] = None) -> str:
    """
    Format the hover tooltip title for a sample timestamp.

    1D: 'Mon, Jan 5, 09:30', 1W/1M: 'Monday, January 5, 2024',
    longer periods: 'January 5, 2024'.
    """
    dt = from_epoch_ms(ts, tz)
    if period == Period.ONE_DAY:
        return f"{dt:%a, %b} {dt.day}, {dt:%H:%M}"
    if period in (Period.ONE_WEEK, Period.ONE_MONTH):
        return f"{dt:%A, %B} {dt.day}, {dt.year}"
    return f"{dt:%B} {dt.day}, {dt.year}"


def range_text(ts_from: int, ts_to: int, period: Period, tz: Optional[ZoneInfo] = None) -> str:
    """Human readable 'from – to' text for a selected date range."""
    return f"{tooltip_title(ts_from, period, tz)} – {tooltip_title(ts_to, period, tz)}"
