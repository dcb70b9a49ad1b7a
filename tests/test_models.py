# tests/test_models.py
from datetime import datetime
from datetime import timezone

import pytest
from pydantic import ValidationError

from nexttogo_service.models import DisplayableRace
from nexttogo_service.models import Race
from nexttogo_service.models import RaceCategory
from nexttogo_service.models import RaceResponse
from tests.utils import create_mock_race
from tests.utils import feed_payload


def test_races_are_equal_by_id_only():
    original = create_mock_race("1", start_offset=60, meeting_name="Flemington")
    moved = create_mock_race("1", start_offset=600, meeting_name="Randwick", race_number=7)
    other = create_mock_race("2", start_offset=60, meeting_name="Flemington")

    assert original == moved
    assert hash(original) == hash(moved)
    assert original != other
    assert len({original, moved, other}) == 2


def test_race_is_immutable():
    race = create_mock_race("1")
    with pytest.raises(ValidationError):
        race.meeting_name = "Changed"


def test_race_rejects_non_positive_race_number():
    with pytest.raises(ValidationError):
        create_mock_race("1", race_number=0)


def test_naive_start_is_treated_as_utc():
    race = Race(
        id="1",
        meeting_name="Test",
        race_number=1,
        advertised_start=datetime(2025, 2, 15, 12, 0),
        category_id=RaceCategory.HORSE.value,
    )
    assert race.advertised_start.tzinfo == timezone.utc


def test_category_lookup_and_hints():
    assert RaceCategory.from_id("4a2788f8-e825-4d36-9894-efd4baf1cfae") is RaceCategory.HORSE
    assert RaceCategory.from_id("not-a-category") is None
    assert RaceCategory.GREYHOUND.display_name == "Greyhound"
    assert RaceCategory.HARNESS.emoji == "🐎🛷"
    assert RaceCategory.HORSE.icon == "figure.equestrian.sports"
    assert len(RaceCategory) == 3


def test_race_exposes_its_category():
    assert create_mock_race("1", category=RaceCategory.HARNESS).category is RaceCategory.HARNESS
    unknown = create_mock_race("2").model_copy(update={"category_id": "mystery"})
    assert unknown.category is None


def test_displayable_race_ids():
    race = create_mock_race("abc")
    row = DisplayableRace.for_race(race, 3)
    placeholder = DisplayableRace.placeholder(2)

    assert row.id == "abc-3"
    assert row.race is race
    assert not row.is_placeholder
    assert placeholder.id == "placeholder-2"
    assert placeholder.race is None
    assert placeholder.is_placeholder


def test_response_decodes_in_next_to_go_order():
    race1 = create_mock_race("1", start_offset=60)
    race2 = create_mock_race("2", start_offset=120)
    payload = feed_payload([race1, race2])
    payload["data"]["next_to_go_ids"] = ["2", "1"]

    races = RaceResponse.model_validate(payload).data.ordered_races()

    assert [r.id for r in races] == ["2", "1"]
    assert races[1].advertised_start == race1.advertised_start
    assert races[1].meeting_name == race1.meeting_name


def test_response_drops_ids_without_summary():
    race1 = create_mock_race("1")
    payload = feed_payload([race1], extra_ids=["ghost"])

    races = RaceResponse.model_validate(payload).data.ordered_races()

    assert [r.id for r in races] == ["1"]


def test_response_decodes_epoch_seconds_as_utc():
    payload = feed_payload([])
    payload["data"]["next_to_go_ids"] = ["x"]
    payload["data"]["race_summaries"]["x"] = {
        "race_id": "x",
        "meeting_name": "Albion Park",
        "race_number": 4,
        "advertised_start": {"seconds": 1739620800},
        "category_id": RaceCategory.GREYHOUND.value,
        "venue_state": "QLD",
    }

    (race,) = RaceResponse.model_validate(payload).data.ordered_races()

    assert race.advertised_start == datetime(2025, 2, 15, 12, 0, tzinfo=timezone.utc)
    assert race.category is RaceCategory.GREYHOUND


def test_response_with_missing_field_fails_to_decode():
    payload = feed_payload([create_mock_race("1")])
    del payload["data"]["race_summaries"]["1"]["meeting_name"]

    with pytest.raises(ValidationError):
        RaceResponse.model_validate(payload)


@pytest.mark.parametrize("seconds", [10**15, -(10**15)])
def test_response_with_unrepresentable_start_fails_to_decode(seconds):
    payload = feed_payload([create_mock_race("1")])
    payload["data"]["race_summaries"]["1"]["advertised_start"]["seconds"] = seconds

    with pytest.raises(ValidationError):
        RaceResponse.model_validate(payload)
