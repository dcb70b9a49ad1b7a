# nexttogo_service/adapters/stub_adapter.py
import asyncio
from typing import Any
from typing import Iterable
from typing import List
from typing import Optional

from ..models import Race
from .base import BaseFeedAdapter


class StubFeedAdapter(BaseFeedAdapter):
    """
    An in-memory feed for previews and tests.
    Returns a predefined list of races, or raises a predefined error, after an optional delay.
    """

    SOURCE_NAME = "Stub"
    requires_http_client = False

    def __init__(
        self,
        races: Iterable[Race] = (),
        error: Optional[Exception] = None,
        delay: float = 0,
        config=None,
    ):
        super().__init__(source_name=self.SOURCE_NAME, base_url="stub://", config=config)
        self.races = list(races)
        self.error = error
        self.delay = delay
        self.call_count = 0

    async def _fetch_data(self) -> Any:
        self.call_count += 1
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.races)

    def _parse_races(self, raw_data: Any) -> List[Race]:
        return list(raw_data)
