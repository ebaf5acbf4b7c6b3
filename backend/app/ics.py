import hashlib
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from dateutil import parser as dt_parser
from icalendar import Calendar, Event

from app.models import CalendarEvent

logger = logging.getLogger(__name__)

EVENT_DURATION = timedelta(hours=1)


def parse_event_date(raw: Optional[str]) -> Optional[date]:
    if not raw or not str(raw).strip():
        return None
    try:
        return dt_parser.parse(str(raw).strip()).date()
    except (ValueError, OverflowError):
        return None


def parse_event_time(raw: Optional[str]) -> Optional[time]:
    if not raw or not str(raw).strip():
        return None
    try:
        t = dt_parser.parse(str(raw).strip()).time()
    except (ValueError, OverflowError):
        return None
    return t.replace(second=0, microsecond=0)


def generate_event_uid(ev: CalendarEvent) -> str:
    base = "|".join(
        [
            (ev.title or "").lower().strip(),
            (ev.date or "").strip(),
            (ev.time or "").strip(),
            (ev.location or "").strip(),
            (ev.description or "").strip(),
        ]
    )
    digest = hashlib.sha1(base.encode("utf-8")).hexdigest()
    return f"{digest}@event-calendar-ai"


def events_to_ics(events: List[CalendarEvent]) -> bytes:
    cal = Calendar()
    cal.add("prodid", "-//Event Calendar AI//EN")
    cal.add("version", "2.0")
    stamp = datetime.now(timezone.utc)

    for ev in events:
        day = parse_event_date(ev.date)
        if day is None:
            logger.warning(f"Skipping event without a usable date: {ev.title!r} ({ev.date!r})")
            continue

        e = Event()
        e.add("uid", generate_event_uid(ev))
        e.add("dtstamp", stamp)
        e.add("summary", ev.title or "Untitled event")
        if ev.description:
            e.add("description", ev.description)
        if ev.location:
            e.add("location", ev.location)

        start_time = parse_event_time(ev.time)
        if start_time is not None:
            start_dt = datetime.combine(day, start_time)
            e.add("dtstart", start_dt)
            e.add("dtend", start_dt + EVENT_DURATION)
        else:
            e.add("dtstart", day)
            e.add("dtend", day + timedelta(days=1))

        cal.add_component(e)

    return cal.to_ical()
