# tests/test_selection.py
from datetime import timedelta

import pytest

from nexttogo_service.core.exceptions import HttpStatusError
from nexttogo_service.models import RaceCategory
from nexttogo_service.selection import build_display
from nexttogo_service.selection import select_races
from nexttogo_service.state import Empty
from nexttogo_service.state import Error
from nexttogo_service.state import Loaded
from nexttogo_service.state import Loading
from tests.utils import NOW
from tests.utils import create_mock_race

GRACE = timedelta(seconds=60)


def select(races, category_filter=(), window_size=5, now=NOW):
    return select_races(
        Loaded(races=tuple(races)),
        now,
        category_filter,
        window_size=window_size,
        grace_period=GRACE,
    )


@pytest.mark.parametrize("state", [Loading(), Empty(), Error(reason=HttpStatusError(500))])
def test_non_loaded_states_select_nothing(state):
    assert select_races(state, NOW, (), window_size=5, grace_period=GRACE) == []


def test_grace_boundary_is_inclusive():
    on_boundary = create_mock_race("edge", start_offset=-60)
    just_past = create_mock_race("gone", start_offset=-61)

    assert [r.id for r in select([on_boundary, just_past])] == ["edge"]


def test_sorted_by_advertised_start():
    races = [
        create_mock_race("c", start_offset=300),
        create_mock_race("a", start_offset=-30),
        create_mock_race("b", start_offset=100),
    ]
    assert [r.id for r in select(races)] == ["a", "b", "c"]


def test_sort_is_stable_for_equal_starts():
    races = [
        create_mock_race("first", start_offset=100),
        create_mock_race("early", start_offset=50),
        create_mock_race("second", start_offset=100),
        create_mock_race("third", start_offset=100),
    ]
    assert [r.id for r in select(races)] == ["early", "first", "second", "third"]


def test_truncates_to_window_after_sorting():
    races = [create_mock_race(str(i), start_offset=600 - i * 10) for i in range(8)]
    selected = select(races, window_size=5)
    assert [r.id for r in selected] == ["7", "6", "5", "4", "3"]


def test_empty_filter_keeps_every_category():
    races = [
        create_mock_race("h", category=RaceCategory.HORSE),
        create_mock_race("n", category=RaceCategory.HARNESS),
        create_mock_race("g", category=RaceCategory.GREYHOUND),
    ]
    assert len(select(races)) == 3


def test_filter_accepts_categories_or_ids():
    races = [
        create_mock_race("h", start_offset=10, category=RaceCategory.HORSE),
        create_mock_race("n", start_offset=20, category=RaceCategory.HARNESS),
        create_mock_race("g", start_offset=30, category=RaceCategory.GREYHOUND),
    ]
    assert [r.id for r in select(races, {RaceCategory.GREYHOUND, RaceCategory.HORSE})] == ["h", "g"]
    assert [r.id for r in select(races, [RaceCategory.HARNESS.value])] == ["n"]


def test_filter_applies_before_truncation():
    races = [create_mock_race(f"h{i}", start_offset=i, category=RaceCategory.HORSE) for i in range(6)]
    races.append(create_mock_race("g", start_offset=500, category=RaceCategory.GREYHOUND))
    assert [r.id for r in select(races, {RaceCategory.GREYHOUND})] == ["g"]


def test_mixed_categories_with_filter():
    horse = create_mock_race("1", start_offset=30, category=RaceCategory.HORSE)
    harness = create_mock_race("2", start_offset=90, category=RaceCategory.HARNESS)
    greyhound = create_mock_race("3", start_offset=-70, category=RaceCategory.GREYHOUND)
    races = [horse, harness, greyhound]

    assert [r.id for r in select(races)] == ["1", "2"]
    assert [r.id for r in select(races, {RaceCategory.HORSE})] == ["1"]


def test_selection_is_repeatable():
    races = [create_mock_race(str(i), start_offset=i * 7 % 5) for i in range(6)]
    assert select(races) == select(races)
    assert [r.id for r in select(races)] == [r.id for r in select(races)]


def test_selection_depends_on_given_instant():
    race = create_mock_race("1", start_offset=0)
    assert select([race], now=NOW + timedelta(seconds=60)) == [race]
    assert select([race], now=NOW + timedelta(seconds=61)) == []


@pytest.mark.parametrize("count", range(0, 6))
def test_display_always_fills_the_window(count):
    races = [create_mock_race(str(i), start_offset=i) for i in range(count)]

    rows = build_display(races, 5)

    assert len(rows) == 5
    assert [row.race for row in rows[:count]] == races
    assert all(row.is_placeholder for row in rows[count:])


def test_display_ids():
    races = [create_mock_race("a"), create_mock_race("b")]

    rows = build_display(races, 4)

    assert [row.id for row in rows] == ["a-0", "b-1", "placeholder-0", "placeholder-1"]


def test_display_never_exceeds_the_window():
    races = [create_mock_race(str(i)) for i in range(7)]
    rows = build_display(races, 5)
    assert len(rows) == 5
    assert not any(row.is_placeholder for row in rows)
