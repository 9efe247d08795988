from datetime import date
from typing import List

from ella_rises.models import Event


class EventRepository:
    @staticmethod
    def get_event(event_id: int) -> Event:
        return Event.query.filter_by(event_id=event_id).first()

    @staticmethod
    def find_between(start: date, end: date) -> List[Event]:
        """Events dated within ``[start, end]``, earliest first."""
        return (
            Event.query.filter(Event.event_date >= start, Event.event_date <= end)
            .order_by(Event.event_date.asc(), Event.event_start_time.asc())
            .all()
        )

    @staticmethod
    def list_for_forms() -> List[Event]:
        return Event.query.order_by(
            Event.event_name, Event.event_date, Event.event_start_time
        ).all()
