from datetime import date
from pathlib import Path
import sys

import pytest

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from space_planner.config import build_settings
from space_planner.data import JsonPlannerStore
from space_planner.domain import PlannerState
from space_planner.errors import PersistenceError
from space_planner.services import PlannerService, ServiceContext


class FakeClock:
    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


class FailingGateway:
    """Gateway whose writes are always rejected."""

    def __init__(self, state: PlannerState | None = None):
        self.state = state or PlannerState()
        self.save_calls = 0

    def load(self) -> PlannerState:
        return self.state

    def save(self, state: PlannerState) -> None:
        self.save_calls += 1
        raise PersistenceError("store rejected write")


@pytest.fixture()
def settings(tmp_path: Path):
    return build_settings(tmp_path)


@pytest.fixture()
def clock():
    return FakeClock(date(2025, 6, 5))


@pytest.fixture()
def store(settings):
    return JsonPlannerStore(settings.storage.data_file)


@pytest.fixture()
def service(settings, store, clock):
    context = ServiceContext(settings=settings, gateway=store, clock=clock)
    return PlannerService(context)
