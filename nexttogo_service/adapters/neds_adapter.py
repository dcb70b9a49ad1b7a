# nexttogo_service/adapters/neds_adapter.py
from typing import List

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_FEED_URL
from ..core.exceptions import DecodingFailureError
from ..core.exceptions import InvalidEndpointError
from ..models import Race
from ..models import RaceResponse
from .base import BaseFeedAdapter


class NedsNextRacesAdapter(BaseFeedAdapter):
    """
    Adapter for the Neds "next races" JSON feed.

    The feed lists races in ``next_to_go_ids`` order and carries their details
    in a ``race_summaries`` map; ids with no summary are skipped.
    """

    SOURCE_NAME = "Neds"

    def __init__(self, config=None, url: str = None):
        if url is None:
            url = config.FEED_URL if config is not None else DEFAULT_FEED_URL
        timeout = config.FETCH_TIMEOUT_SECONDS if config is not None else 20
        super().__init__(
            source_name=self.SOURCE_NAME, base_url=url, config=config, timeout=timeout
        )

    def _build_url(self) -> httpx.URL:
        try:
            url = httpx.URL(self.base_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidEndpointError(self.base_url, str(e)) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidEndpointError(self.base_url, "expected an absolute http(s) URL")
        return url

    async def _fetch_data(self) -> bytes:
        url = str(self._build_url())
        headers = {"Accept": "application/json"}
        if self.http_client is not None:
            response = await self.make_request(self.http_client, "GET", url, headers=headers)
        else:
            async with httpx.AsyncClient() as client:
                response = await self.make_request(client, "GET", url, headers=headers)
        return response.content

    def _parse_races(self, raw_data: bytes) -> List[Race]:
        try:
            response = RaceResponse.model_validate_json(raw_data)
            races = response.data.ordered_races()
        except ValidationError as e:
            self.logger.error("Feed response did not match schema", errors=e.error_count())
            raise DecodingFailureError(str(e)) from e

        dropped = len(response.data.next_to_go_ids) - len(races)
        if dropped:
            self.logger.warning("Skipped race ids with no summary", count=dropped)
        return races
