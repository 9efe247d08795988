import calendar
import logging
import re
from datetime import date, time
from typing import Any, Dict, List, Optional

from ella_rises.repositories import EventRegistrationRepository, EventRepository

logger = logging.getLogger(__name__)

MONTHS_SHOWN = 3
TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by whole months, clamping the day to the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_time(value) -> str:
    """Render a stored 24-hour time as ``h:MM AM/PM``."""
    if value is None or value == "":
        return ""
    if isinstance(value, time):
        value = value.strftime("%H:%M:%S")
    value = str(value).strip()
    if "AM" in value.upper() or "PM" in value.upper():
        return value
    match = TIME_PATTERN.match(value)
    if not match:
        return value
    hour = int(match.group(1))
    minutes = match.group(2)
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12
    if display_hour == 0:
        display_hour = 12
    return f"{display_hour}:{minutes} {suffix}"


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def month_descriptors(today: date) -> List[Dict[str, Any]]:
    months = []
    for offset in range(MONTHS_SHOWN):
        first = add_months(today.replace(day=1), offset)
        months.append(
            {
                "name": calendar.month_name[first.month],
                "year": first.year,
                "month": first.month,
                "first_weekday": sunday_based_weekday(first),
                "days_in_month": calendar.monthrange(first.year, first.month)[1],
                "events_by_date": {},
            }
        )
    return months


class CalendarService:
    @staticmethod
    def build_calendar(today: date, user_id: Optional[int] = None) -> Dict[str, Any]:
        window_end = add_months(today, MONTHS_SHOWN)
        events = EventRepository.find_between(today, window_end)
        event_ids = [event.event_id for event in events]

        counts = EventRegistrationRepository.counts_by_event(event_ids)
        registered_ids = set()
        if user_id:
            registered_ids = EventRegistrationRepository.active_event_ids_for_user(user_id)

        months = month_descriptors(today)
        by_month = {(m["year"], m["month"]): m for m in months}

        formatted_events = []
        for event in events:
            registration_count = counts.get(event.event_id, 0)
            formatted = {
                "event_id": event.event_id,
                "event_name": event.event_name,
                "event_location": event.event_location,
                "event_date": event.event_date.isoformat(),
                "start_time": format_time(event.event_start_time),
                "end_time": format_time(event.event_end_time),
                "event_capacity": event.event_capacity,
                "registration_count": registration_count,
                "spots_left": (
                    max(event.event_capacity - registration_count, 0)
                    if event.event_capacity is not None
                    else None
                ),
                "user_registered": event.event_id in registered_ids,
            }
            formatted_events.append(formatted)

            # Events dated today + 3 months fall outside the three visible grids
            month = by_month.get((event.event_date.year, event.event_date.month))
            if month is not None:
                month["events_by_date"].setdefault(formatted["event_date"], []).append(
                    formatted
                )

        logger.info(
            f"Built calendar from {today} to {window_end} with {len(events)} events"
        )
        return {"months": months, "events": formatted_events, "today": today.isoformat()}
