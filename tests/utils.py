# tests/utils.py
from datetime import datetime
from datetime import timedelta
from datetime import timezone

from nexttogo_service.config import Settings
from nexttogo_service.models import Race
from nexttogo_service.models import RaceCategory

NOW = datetime(2025, 2, 15, 12, 0, 0, tzinfo=timezone.utc)


def get_test_settings(**overrides) -> Settings:
    """Settings that never read a .env file."""
    values = {
        "FEED_SOURCE": "stub",
        "FEED_URL": "https://feed.test/rest/v1/racing/?method=nextraces&count=10",
        "RACE_LIMIT": 5,
        "REFRESH_INTERVAL_SECONDS": 10,
        "GRACE_PERIOD_SECONDS": 60,
        "CLOCK_TICK_SECONDS": 1,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime = NOW):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float):
        self.current += timedelta(seconds=seconds)


def create_mock_race(
    race_id: str,
    start_offset: float = 120,
    category: RaceCategory = RaceCategory.HORSE,
    meeting_name: str = None,
    race_number: int = 1,
    now: datetime = NOW,
) -> Race:
    """Builds a race starting ``start_offset`` seconds after ``now``."""
    return Race(
        id=race_id,
        meeting_name=meeting_name or f"Meeting {race_id}",
        race_number=race_number,
        advertised_start=now + timedelta(seconds=start_offset),
        category_id=category.value,
    )


def feed_payload(races, extra_ids=()) -> dict:
    """Builds a feed response body in the wire schema for the given races."""
    return {
        "status": 200,
        "data": {
            "next_to_go_ids": [r.id for r in races] + list(extra_ids),
            "race_summaries": {
                r.id: {
                    "race_id": r.id,
                    "meeting_name": r.meeting_name,
                    "race_number": r.race_number,
                    "advertised_start": {"seconds": int(r.advertised_start.timestamp())},
                    "category_id": r.category_id,
                }
                for r in races
            },
        },
    }
