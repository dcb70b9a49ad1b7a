# nexttogo_service/engine.py

import asyncio
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any
from typing import Callable
from typing import Dict
from typing import FrozenSet
from typing import Iterable
from typing import List
from typing import Optional

import httpx
import structlog

from .adapters import create_adapter
from .adapters.base import BaseFeedAdapter
from .config import get_settings
from .core.exceptions import FeedError
from .countdown import Countdown
from .countdown import countdown
from .models import DisplayableRace
from .models import Race
from .models import RaceCategory
from .reducer import FeedStore
from .reducer import StateObserver
from .selection import CategoryLike
from .selection import build_display
from .selection import select_races
from .state import Empty
from .state import FeedState
from .state import Loaded


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DisplayFrame:
    """Everything one render pass needs, taken from a single snapshot."""

    state: FeedState
    now: datetime
    category_filter: FrozenSet[RaceCategory]
    rows: List[DisplayableRace]


class NextToGoEngine:
    """
    Keeps the next-to-go list current.

    Two loops run side by side once started: the refresh loop fetches the feed
    every ``REFRESH_INTERVAL_SECONDS`` (counted from when a fetch finishes) and
    the clock loop advances the current instant every ``CLOCK_TICK_SECONDS``.
    Both write through the ``FeedStore``; everything shown is derived from it
    on demand.
    """

    def __init__(
        self,
        adapter: Optional[BaseFeedAdapter] = None,
        config=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.logger = structlog.get_logger(__name__)
        self.config = config or get_settings()
        self.adapter = adapter or create_adapter(self.config)
        self.clock = clock or _utc_now

        self.window_size: int = self.config.RACE_LIMIT
        self.refresh_interval: float = self.config.REFRESH_INTERVAL_SECONDS
        self.clock_tick: float = self.config.CLOCK_TICK_SECONDS
        self.grace_period = timedelta(seconds=self.config.GRACE_PERIOD_SECONDS)

        self.store = FeedStore(now=self.clock())
        self._category_filter: FrozenSet[RaceCategory] = frozenset()

        self._generation = 0
        self._running = False
        self._tasks: List[asyncio.Task] = []

        self._owns_http_client = False
        if self.adapter.requires_http_client and self.adapter.http_client is None:
            self.adapter.http_client = httpx.AsyncClient(timeout=self.adapter.timeout)
            self._owns_http_client = True

        self.logger.info(
            "Engine initialized",
            adapter=self.adapter.source_name,
            window_size=self.window_size,
            refresh_interval=self.refresh_interval,
        )

    # --- Lifecycle ---

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        """
        Starts the refresh and clock loops on the running event loop.
        Calling it again while running does nothing.
        """
        if self._running:
            return
        self._running = True
        generation = self._generation
        self.store.tick(self.clock())
        self._tasks = [
            asyncio.create_task(self._refresh_loop(generation), name="nexttogo-refresh"),
            asyncio.create_task(self._clock_loop(generation), name="nexttogo-clock"),
        ]
        self.logger.info("Engine started")

    def stop(self):
        """
        Stops both loops. Safe to call repeatedly or before ``start``.
        A fetch still in flight is abandoned and its result never applied.
        """
        if not self._running:
            return
        self._running = False
        self._generation += 1
        for task in self._tasks:
            task.cancel()
        self.logger.info("Engine stopped", state=self.store.state.kind)

    async def aclose(self):
        """Stops the engine, waits for its loops to exit and releases the HTTP client."""
        self.stop()
        tasks, self._tasks = self._tasks, []
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._owns_http_client and self.adapter.http_client is not None:
            await self.adapter.http_client.aclose()
            self.adapter.http_client = None
            self._owns_http_client = False

    async def _refresh_loop(self, generation: int):
        while generation == self._generation:
            await self.fetch_races()
            await asyncio.sleep(self.refresh_interval)

    async def _clock_loop(self, generation: int):
        while generation == self._generation:
            await asyncio.sleep(self.clock_tick)
            self.store.tick(self.clock())

    # --- Fetching ---

    async def fetch_races(self) -> bool:
        """
        Fetches the feed once and applies the outcome.
        Returns True when the feed state changed.
        """
        generation = self._generation
        try:
            result = await self.adapter.fetch_races()
        except FeedError as e:
            result = e
        except Exception as e:
            self.logger.error("Adapter raised outside its fetch pipeline", exc_info=True)
            result = FeedError.from_exception(e)

        if generation != self._generation:
            self.logger.info("Discarding fetch result that arrived after stop")
            return False
        return self.store.apply(result)

    # --- Controller surface ---

    @property
    def state(self) -> FeedState:
        return self.store.state

    @property
    def current_date(self) -> datetime:
        return self.store.now

    @property
    def category_filter(self) -> FrozenSet[RaceCategory]:
        return self._category_filter

    @category_filter.setter
    def category_filter(self, categories: Iterable[CategoryLike]):
        resolved = set()
        for category in categories:
            if isinstance(category, RaceCategory):
                resolved.add(category)
                continue
            match = RaceCategory.from_id(category)
            if match is None:
                raise ValueError(f"Unknown race category: {category!r}")
            resolved.add(match)
        self._category_filter = frozenset(resolved)
        self.logger.info("Category filter updated", categories=sorted(c.display_name for c in resolved))

    def toggle_category(self, category: RaceCategory):
        if category in self._category_filter:
            self.category_filter = self._category_filter - {category}
        else:
            self.category_filter = self._category_filter | {category}

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        return self.store.subscribe(observer)

    def render(self) -> DisplayFrame:
        snapshot = self.store.snapshot()
        category_filter = self._category_filter
        selected = select_races(
            snapshot.state,
            snapshot.now,
            category_filter,
            window_size=self.window_size,
            grace_period=self.grace_period,
        )
        return DisplayFrame(
            state=snapshot.state,
            now=snapshot.now,
            category_filter=category_filter,
            rows=build_display(selected, self.window_size),
        )

    def filtered_races(self) -> List[Race]:
        snapshot = self.store.snapshot()
        return select_races(
            snapshot.state,
            snapshot.now,
            self._category_filter,
            window_size=self.window_size,
            grace_period=self.grace_period,
        )

    def displayed_races(self) -> List[DisplayableRace]:
        return self.render().rows

    def countdown_for(self, race: Race, now: Optional[datetime] = None) -> Countdown:
        return countdown(now or self.store.now, race.advertised_start)

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self._running,
            "state": self.store.state.kind,
            "refresh_interval": self.refresh_interval,
            "window_size": self.window_size,
            "grace_period": self.grace_period.total_seconds(),
            "adapter": self.adapter.get_status(),
        }

    def set_races_for_testing(self, races: Iterable[Race]):
        """Forces the races shown, bypassing the feed. No races means an empty feed."""
        races = tuple(races)
        self.store.force(Loaded(races=races) if races else Empty())
