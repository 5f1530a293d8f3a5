# backend/tests/conftest.py
import os
import sys
import pytest
from fastapi.testclient import TestClient

# Make /Project/backend importable as top-level
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Known admin token; API tests never touch a real MongoDB
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ.pop("MONGO_URI", None)

# Import app only after setting env
from main import app
from services.storage.memory_store import InMemoryStore

DEMO_USER = "demo"
DEMO_KEY = "secret-demo-key"


class FakeClock:
    """Callable clock the stores can be built with; move it with ``advance``."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture
def client():
    # Use context manager so FastAPI lifespan (startup/shutdown) runs
    with TestClient(app) as c:
        # fresh store per test
        fresh = InMemoryStore()
        fresh.set_api_key(DEMO_USER, DEMO_KEY, "demo")
        app.state.store = fresh
        yield c


@pytest.fixture
def demo_headers():
    return {"X-API-Key": DEMO_KEY}


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer test-admin-key"}
