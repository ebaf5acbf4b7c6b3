from datetime import date, datetime, timezone
from typing import Optional


def create_ai_prompt(today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"""
Extract ALL events from this image. For each event found, provide:
- title (event name)
- date (YYYY-MM-DD format, convert relative dates assuming today is {today.isoformat()})
- time (HH:MM format, use 24-hour time, if no time specified use "09:00")
- location (venue/address, if not specified use "TBD")
- description (brief details)

Return ONLY a JSON array of events, no other text. Example format:
[{{"title": "Event Name", "date": "2025-08-15", "time": "19:00", "location": "Venue", "description": "Details"}}]

If you find multiple events (like a schedule), extract ALL of them.
""".strip()
