# nexttogo_service/selection.py
from datetime import datetime
from datetime import timedelta
from typing import Iterable
from typing import List
from typing import Sequence
from typing import Set
from typing import Union

from .models import DisplayableRace
from .models import Race
from .models import RaceCategory
from .state import Empty
from .state import Error
from .state import FeedState
from .state import Loaded
from .state import Loading
from .state import assert_never_state

DEFAULT_WINDOW_SIZE = 5
DEFAULT_GRACE_PERIOD = timedelta(seconds=60)

CategoryLike = Union[RaceCategory, str]


def category_ids(category_filter: Iterable[CategoryLike]) -> Set[str]:
    return {c.value if isinstance(c, RaceCategory) else c for c in category_filter}


def select_races(
    state: FeedState,
    now: datetime,
    category_filter: Iterable[CategoryLike] = (),
    *,
    window_size: int = DEFAULT_WINDOW_SIZE,
    grace_period: timedelta = DEFAULT_GRACE_PERIOD,
) -> List[Race]:
    """
    Picks the races to show for the given state, instant and filter.

    Keeps races whose start plus the grace period has not yet passed
    (inclusive), restricted to the filtered categories when the filter is
    non-empty, ordered by start (stable for ties) and cut to the window.
    """
    if isinstance(state, Loaded):
        races = state.races
    elif isinstance(state, (Loading, Empty, Error)):
        return []
    else:
        assert_never_state(state)

    wanted = category_ids(category_filter)
    retained = [
        race
        for race in races
        if now <= race.advertised_start + grace_period
        and (not wanted or race.category_id in wanted)
    ]
    retained.sort(key=lambda race: race.advertised_start)
    return retained[:window_size]


def build_display(selected: Sequence[Race], window_size: int = DEFAULT_WINDOW_SIZE) -> List[DisplayableRace]:
    """Pads the selection to exactly ``window_size`` slots."""
    rows = [DisplayableRace.for_race(race, index) for index, race in enumerate(selected[:window_size])]
    placeholders_needed = window_size - len(rows)
    rows.extend(DisplayableRace.placeholder(index) for index in range(placeholders_needed))
    return rows
