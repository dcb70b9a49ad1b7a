# nexttogo_service/countdown.py
from datetime import datetime
from datetime import timedelta
from typing import NamedTuple

from .models import Race

STARTED = "Started"
STARTED_PHRASE = "Race has started"
REMAINING_PREFIX = "Time remaining until start"


class Countdown(NamedTuple):
    compact: str
    accessible: str


def _plural(quantity: int, unit: str) -> str:
    return f"{quantity} {unit}" if quantity == 1 else f"{quantity} {unit}s"


def countdown(now: datetime, start: datetime) -> Countdown:
    """
    Formats the time left until ``start`` as ``MM:SS`` plus a spoken phrase.

    >>> from datetime import timezone
    >>> t = datetime(2025, 2, 15, tzinfo=timezone.utc)
    >>> countdown(t, t + timedelta(seconds=120))
    Countdown(compact='02:00', accessible='Time remaining until start: 2 minutes')
    """
    delta = (start - now) // timedelta(seconds=1)
    if delta <= 0:
        return Countdown(STARTED, STARTED_PHRASE)

    minutes, seconds = divmod(delta, 60)
    compact = f"{minutes:02d}:{seconds:02d}"
    if minutes == 0:
        remaining = _plural(seconds, "second")
    elif seconds == 0:
        remaining = _plural(minutes, "minute")
    else:
        remaining = f"{_plural(minutes, 'minute')} and {_plural(seconds, 'second')}"
    return Countdown(compact, f"{REMAINING_PREFIX}: {remaining}")


def row_accessibility_label(race: Race) -> str:
    return f"{race.meeting_name} Race {race.race_number}"
