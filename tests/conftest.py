import sys
from pathlib import Path

import pytest

# =============================================================================
# 1. SYSTEM PATH INJECTION
# =============================================================================
# Makes 'nexttogo_service' and 'tests' importable regardless of where pytest is run from.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tests.utils import NOW  # noqa: E402
from tests.utils import FrozenClock  # noqa: E402
from tests.utils import get_test_settings  # noqa: E402


# =============================================================================
# 2. FIXTURES
# =============================================================================
@pytest.fixture
def test_settings():
    return get_test_settings()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def frozen_clock():
    return FrozenClock()
