# nexttogo_service/models.py

from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class NextToGoBaseModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )


# --- Categories ---
class RaceCategory(Enum):
    GREYHOUND = "9daef0d7-bf3c-4f50-921d-8e818c60fe61"
    HARNESS = "161d9be2-e909-4326-8c2c-35ed71fb460b"
    HORSE = "4a2788f8-e825-4d36-9894-efd4baf1cfae"

    @property
    def display_name(self) -> str:
        return _CATEGORY_HINTS[self][0]

    @property
    def emoji(self) -> str:
        return _CATEGORY_HINTS[self][1]

    @property
    def icon(self) -> str:
        return _CATEGORY_HINTS[self][2]

    @classmethod
    def from_id(cls, category_id: str) -> Optional["RaceCategory"]:
        try:
            return cls(category_id)
        except ValueError:
            return None


# display name, emoji, icon
_CATEGORY_HINTS = {
    RaceCategory.GREYHOUND: ("Greyhound", "🐕", "dog"),
    RaceCategory.HARNESS: ("Harness", "🐎🛷", "figure.equestrian.sports.circle"),
    RaceCategory.HORSE: ("Horse", "🐎", "figure.equestrian.sports"),
}


# --- Core Data Models ---
class Race(NextToGoBaseModel):
    """
    A single upcoming race.

    Two races are equal when their ids are equal, whatever their other fields
    say. A race whose start time or meeting name changes under a stable id is
    still the same race, so a refreshed feed carrying it does not count as new
    data.
    """

    id: str
    meeting_name: str = Field(..., alias="meetingName")
    race_number: int = Field(..., alias="raceNumber", ge=1)
    advertised_start: datetime = Field(..., alias="advertisedStart")
    category_id: str = Field(..., alias="categoryId")

    @field_validator("advertised_start")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def category(self) -> Optional[RaceCategory]:
        return RaceCategory.from_id(self.category_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Race):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class DisplayableRace(NextToGoBaseModel):
    """A display slot: a race with a per-render stable id, or a placeholder."""

    id: str
    race: Optional[Race] = None

    @classmethod
    def for_race(cls, race: Race, index: int) -> "DisplayableRace":
        return cls(id=f"{race.id}-{index}", race=race)

    @classmethod
    def placeholder(cls, index: int) -> "DisplayableRace":
        return cls(id=f"placeholder-{index}")

    @property
    def is_placeholder(self) -> bool:
        return self.race is None


# --- Wire Schema ---
class AdvertisedStart(NextToGoBaseModel):
    seconds: int

    @field_validator("seconds")
    @classmethod
    def within_datetime_range(cls, v: int) -> int:
        try:
            datetime.fromtimestamp(v, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"advertised start {v} is outside the representable date range")
        return v

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds, tz=timezone.utc)


class RaceSummary(NextToGoBaseModel):
    race_id: str
    meeting_name: str
    race_number: int
    advertised_start: AdvertisedStart
    category_id: str

    def to_race(self) -> Race:
        return Race(
            id=self.race_id,
            meeting_name=self.meeting_name,
            race_number=self.race_number,
            advertised_start=self.advertised_start.to_datetime(),
            category_id=self.category_id,
        )


class RaceData(NextToGoBaseModel):
    next_to_go_ids: List[str]
    race_summaries: Dict[str, RaceSummary]

    def ordered_races(self) -> List[Race]:
        """Races in ``next_to_go_ids`` order; ids without a summary are dropped."""
        return [
            self.race_summaries[race_id].to_race()
            for race_id in self.next_to_go_ids
            if race_id in self.race_summaries
        ]


class RaceResponse(NextToGoBaseModel):
    status: int
    data: RaceData
