# nexttogo_service/state.py
"""
The feed state: exactly one of Loading, Loaded, Empty or Error.

Consumers branch on the variant with ``isinstance`` and must treat an
unrecognised value as a programming error (see ``assert_never_state``).
"""

from dataclasses import dataclass
from typing import ClassVar
from typing import NoReturn
from typing import Tuple
from typing import Union

from .core.exceptions import FeedError
from .models import Race


@dataclass(frozen=True)
class Loading:
    """Initial value; no fetch has completed yet."""

    kind: ClassVar[str] = "loading"


@dataclass(frozen=True)
class Loaded:
    """The last successful fetch returned at least one race."""

    races: Tuple[Race, ...]
    kind: ClassVar[str] = "loaded"

    def __post_init__(self):
        if not self.races:
            raise ValueError("Loaded requires at least one race; use Empty instead.")
        object.__setattr__(self, "races", tuple(self.races))


@dataclass(frozen=True)
class Empty:
    """The last successful fetch returned zero races."""

    kind: ClassVar[str] = "empty"


@dataclass(frozen=True)
class Error:
    """The last fetch failed."""

    reason: FeedError
    kind: ClassVar[str] = "error"


FeedState = Union[Loading, Loaded, Empty, Error]


def assert_never_state(state: object) -> NoReturn:
    raise TypeError(f"Unhandled feed state: {state!r}")
