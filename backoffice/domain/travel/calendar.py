"""
Trip calendar utilities

Pure date arithmetic for the month and week calendar views, plus detection
of trips whose date ranges overlap. Weeks start on Sunday.
"""

import calendar as _calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

MONTH = "month"
WEEK = "week"
CALENDAR_VIEWS = (MONTH, WEEK)


@dataclass(frozen=True)
class CalendarDay:
    date: date
    day_number: int
    is_current_month: bool
    is_today: bool
    is_weekend: bool


@dataclass(frozen=True)
class CalendarTrip:
    id: int
    request_number: str = ""
    status: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def from_travel_request(cls, travel_request) -> "CalendarTrip":
        return cls(
            id=travel_request.id,
            request_number=travel_request.request_number,
            status=travel_request.status,
            start_date=to_date(travel_request.trip_start_date),
            end_date=to_date(travel_request.trip_end_date),
        )


def to_date(value) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a date"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _sunday_index(day: date) -> int:
    # date.weekday(): Monday=0 ... Sunday=6
    return (day.weekday() + 1) % 7


def _make_day(day: date, anchor: date, today: date) -> CalendarDay:
    return CalendarDay(
        date=day,
        day_number=day.day,
        is_current_month=(day.year, day.month) == (anchor.year, anchor.month),
        is_today=day == today,
        is_weekend=day.weekday() >= 5,
    )


def first_day_of_month(anchor: date) -> date:
    return anchor.replace(day=1)


def last_day_of_month(anchor: date) -> date:
    return anchor.replace(day=_calendar.monthrange(anchor.year, anchor.month)[1])


def month_days(anchor: date, today: Optional[date] = None) -> list[CalendarDay]:
    """Days of the month grid, padded with neighbouring days to whole weeks"""
    today = today or date.today()
    first = first_day_of_month(anchor)
    last = last_day_of_month(anchor)
    grid_start = first - timedelta(days=_sunday_index(first))
    grid_end = last + timedelta(days=6 - _sunday_index(last))

    return [
        _make_day(grid_start + timedelta(days=offset), anchor, today)
        for offset in range((grid_end - grid_start).days + 1)
    ]


def week_days(anchor: date, today: Optional[date] = None) -> list[CalendarDay]:
    """The seven days (Sunday to Saturday) of the week containing anchor"""
    today = today or date.today()
    start = anchor - timedelta(days=_sunday_index(anchor))
    return [_make_day(start + timedelta(days=offset), anchor, today) for offset in range(7)]


def _shift_months(anchor: date, months: int) -> date:
    month_index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(anchor.day, _calendar.monthrange(year, month)[1])
    return date(year, month, day)


def navigate_previous(anchor: date, view: str) -> date:
    if view == MONTH:
        return _shift_months(anchor, -1)
    return anchor - timedelta(days=7)


def navigate_next(anchor: date, view: str) -> date:
    if view == MONTH:
        return _shift_months(anchor, 1)
    return anchor + timedelta(days=7)


def format_month_year(anchor: date) -> str:
    return f"{_calendar.month_name[anchor.month]} {anchor.year}"


def format_week_range(anchor: date) -> str:
    days = week_days(anchor, today=anchor)
    first, last = days[0].date, days[-1].date
    return (
        f"{_calendar.month_abbr[first.month]} {first.day} - "
        f"{_calendar.month_abbr[last.month]} {last.day}, {last.year}"
    )


def short_day_names() -> list[str]:
    return ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def trip_bounds(trip) -> Optional[tuple[date, date]]:
    """Displayed range of a trip: start-only trips cover their start day, undated trips nothing"""
    start = to_date(trip.start_date)
    if start is None:
        return None
    end = to_date(trip.end_date)
    return start, end or start


def is_trip_active_on_date(trip, day: date) -> bool:
    bounds = trip_bounds(trip)
    if bounds is None:
        return False
    start, end = bounds
    return start <= to_date(day) <= end


def trips_for_date(trips, day: date) -> list:
    return [trip for trip in trips if is_trip_active_on_date(trip, day)]


def is_trip_start_date(trip, day: date) -> bool:
    start = to_date(trip.start_date)
    return start is not None and start == to_date(day)


def is_trip_end_date(trip, day: date) -> bool:
    end = to_date(trip.end_date)
    return end is not None and end == to_date(day)


def trip_duration(trip) -> int:
    """Length in days counting both ends; 0 when either bound is missing"""
    start, end = to_date(trip.start_date), to_date(trip.end_date)
    if start is None or end is None:
        return 0
    return abs((end - start).days) + 1


def detect_conflicts(trips) -> dict[int, list[int]]:
    """
    Map each trip id to the ids of the other trips its [start, end] range overlaps.

    Trips missing either date are ignored. Only trips with at least one
    conflict get an entry, and every conflict is recorded in both directions.
    """
    dated = []
    for trip in trips:
        start, end = to_date(trip.start_date), to_date(trip.end_date)
        if start is not None and end is not None:
            dated.append((trip.id, start, end))

    conflicts: dict[int, list[int]] = {}
    for i, (id_a, start_a, end_a) in enumerate(dated):
        for id_b, start_b, end_b in dated[i + 1 :]:
            if id_a == id_b:
                continue
            if start_a <= end_b and start_b <= end_a:
                conflicts.setdefault(id_a, []).append(id_b)
                conflicts.setdefault(id_b, []).append(id_a)

    return conflicts
