# nexttogo_service/reducer.py
"""
The single writer for the feed state and the current instant.

Fetch results and clock ticks arrive from independent loops; both go through
``FeedStore`` so a render pass always reads a consistent (state, now) pair.
Neither lock is ever held across an await. Writes are serialized end to end,
notification included, so observers see transitions in the order they happened
even when writers sit on different threads.
"""

import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Callable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

import structlog

from .core.exceptions import FeedError
from .models import Race
from .state import Empty
from .state import Error
from .state import FeedState
from .state import Loaded
from .state import Loading

log = structlog.get_logger(__name__)

FetchResult = Union[Sequence[Race], FeedError]
StateObserver = Callable[[FeedState], None]


@dataclass(frozen=True)
class FeedSnapshot:
    state: FeedState
    now: datetime


def same_races(existing: Sequence[Race], incoming: Sequence[Race]) -> bool:
    """Order-insensitive comparison of two race lists by id."""
    return Counter(race.id for race in existing) == Counter(race.id for race in incoming)


class FeedStore:
    def __init__(self, now: Optional[datetime] = None):
        self._lock = threading.Lock()
        # Reentrant so an observer may itself write back to the store.
        self._write_lock = threading.RLock()
        self._state: FeedState = Loading()
        self._now = now or datetime.now(timezone.utc)
        self._observers: List[StateObserver] = []

    @property
    def state(self) -> FeedState:
        with self._lock:
            return self._state

    @property
    def now(self) -> datetime:
        with self._lock:
            return self._now

    def snapshot(self) -> FeedSnapshot:
        with self._lock:
            return FeedSnapshot(state=self._state, now=self._now)

    def tick(self, now: datetime):
        with self._lock:
            self._now = now

    def apply(self, result: FetchResult) -> bool:
        """
        Applies a fetch outcome. Returns True when the state changed.

        A successful fetch whose races match the loaded ones by id leaves the
        state untouched and notifies nobody.
        """
        with self._write_lock:
            with self._lock:
                new_state = self._reduce(self._state, result)
                if new_state is None:
                    log.debug("Feed unchanged, skipping update")
                    return False
                previous, self._state = self._state, new_state

            log.info("feed_state_changed", previous=previous.kind, current=new_state.kind)
            self._notify(new_state)
            return True

    def force(self, state: FeedState):
        """Replaces the state outright, bypassing update suppression."""
        with self._write_lock:
            with self._lock:
                self._state = state
            self._notify(state)

    @staticmethod
    def _reduce(current: FeedState, result: FetchResult):
        if isinstance(result, FeedError):
            return Error(reason=result)
        races = tuple(result)
        if not races:
            return Empty()
        if isinstance(current, Loaded) and same_races(current.races, races):
            return None
        return Loaded(races=races)

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe():
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _notify(self, state: FeedState):
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(state)
            except Exception:
                log.error("State observer failed", exc_info=True)
