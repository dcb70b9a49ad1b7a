# nexttogo_service/adapters/base.py
from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import List
from typing import Optional

import httpx
import structlog

from ..core.exceptions import FeedError
from ..core.exceptions import HttpStatusError
from ..core.exceptions import InvalidTransportResponseError
from ..core.exceptions import UnknownFeedError
from ..models import Race


class BaseFeedAdapter(ABC):
    """
    Abstract base class for race feed adapters.
    Enforces a standardized fetch/parse pattern and guarantees that every
    failure leaves ``fetch_races`` as a ``FeedError``.
    """

    requires_http_client = True

    def __init__(self, source_name: str, base_url: str, config=None, timeout: float = 20):
        self.source_name = source_name
        self.base_url = base_url
        self.config = config
        self.timeout = timeout
        self.logger = structlog.get_logger(adapter_name=self.source_name)
        self.http_client: Optional[httpx.AsyncClient] = None  # Injected by the engine
        self.last_status = "IDLE"
        self.last_error: Optional[FeedError] = None

    @abstractmethod
    async def _fetch_data(self) -> Any:
        """
        Fetches the raw feed payload.
        This is the only method that should perform network operations.
        """
        raise NotImplementedError

    @abstractmethod
    def _parse_races(self, raw_data: Any) -> List[Race]:
        """
        Parses the raw payload retrieved by _fetch_data into an ordered list of races.
        This method should be a pure function with no side effects.
        """
        raise NotImplementedError

    async def fetch_races(self) -> List[Race]:
        """
        Orchestrates the fetch-then-parse pipeline for the adapter.
        This public method should not be overridden by subclasses.
        """
        try:
            raw_data = await self._fetch_data()
            races = self._parse_races(raw_data)
        except FeedError as e:
            self._record_failure(e)
            raise
        except Exception as e:
            error = UnknownFeedError(e)
            self._record_failure(error)
            raise error from e

        self.last_status = "OK"
        self.last_error = None
        self.logger.debug("Feed fetched", race_count=len(races))
        return races

    def _record_failure(self, error: FeedError):
        self.last_status = "FAILED"
        self.last_error = error
        self.logger.error("Feed fetch failed", kind=error.kind.value, error=str(error))

    async def make_request(
        self, http_client: httpx.AsyncClient, method: str, url: str, **kwargs
    ) -> httpx.Response:
        """
        Makes a single HTTP request and maps transport failures onto the feed error taxonomy.
        There is no retry here: the engine's polling interval is the only retry policy.
        """
        try:
            self.logger.info("Making request", method=method.upper(), url=url)
            response = await http_client.request(method, url, timeout=self.timeout, **kwargs)
        except (httpx.ProtocolError, httpx.DecodingError) as e:
            raise InvalidTransportResponseError(str(e) or type(e).__name__) from e
        except httpx.HTTPError as e:
            self.logger.error("Request error", error=str(e))
            raise UnknownFeedError(e) from e

        if response.status_code != 200:
            self.logger.error(
                "HTTP Status Error during request",
                status_code=response.status_code,
                url=str(response.request.url),
            )
            raise HttpStatusError(response.status_code, str(response.request.url))
        return response

    def get_status(self) -> dict:
        """
        Returns a dictionary representing the adapter's current status.
        """
        return {
            "adapter_name": self.source_name,
            "status": self.last_status,
            "last_error": str(self.last_error) if self.last_error else None,
        }
