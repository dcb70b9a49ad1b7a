from .base import BaseFeedAdapter
from .neds_adapter import NedsNextRacesAdapter
from .stub_adapter import StubFeedAdapter

__all__ = ["BaseFeedAdapter", "NedsNextRacesAdapter", "StubFeedAdapter", "create_adapter"]


def create_adapter(config) -> BaseFeedAdapter:
    """Builds the feed adapter named by ``config.FEED_SOURCE``."""
    if config.FEED_SOURCE == "stub":
        return StubFeedAdapter(config=config)
    return NedsNextRacesAdapter(config=config)
