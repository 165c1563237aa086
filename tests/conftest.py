"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import BUNDLED_CONTENT_DIR, Settings  # noqa: E402
from payprep.content.loader import ContentLibrary  # noqa: E402
from payprep.content.models import ContentPack, PoolEntry, TemplateEntry  # noqa: E402
from payprep.core.rng import SeededRng  # noqa: E402
from payprep.storage import MemoryStore, PrepStorage  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """A fixed-seed RNG."""
    return SeededRng("test-seed")


@pytest.fixture
def app_settings(tmp_path):
    """Settings pointing at a temporary data directory and the bundled content."""
    return Settings(data_dir=tmp_path / "data", content_dir=BUNDLED_CONTENT_DIR)


@pytest.fixture(scope="session")
def bundled_library():
    """The bundled core and fun packs."""
    return ContentLibrary.load(BUNDLED_CONTENT_DIR)


@pytest.fixture
def storage():
    """PrepStorage over an in-memory store."""
    return PrepStorage(MemoryStore())


def make_entry(**overrides) -> TemplateEntry:
    """Static mcq entry with overridable fields."""
    data = {
        "id": "q-1",
        "domain": 1,
        "difficulty": "easy",
        "type": "mcq",
        "prompt": "Pick one",
        "choices": ["a", "b", "c"],
        "answer": 0,
    }
    data.update(overrides)
    return TemplateEntry.model_validate(data)


@pytest.fixture
def static_pool():
    """Twenty static questions spread over every domain, difficulty and type."""
    types = ["mcq", "msq", "numeric", "fill", "order"]
    difficulties = ["easy", "medium", "hard"]
    pool = []
    for n in range(20):
        pool.append(
            PoolEntry(
                pack_id="test",
                entry=make_entry(
                    id=f"static-{n}",
                    domain=n % 5 + 1,
                    difficulty=difficulties[n % 3],
                    type=types[n % 5],
                ),
            )
        )
    return pool


@pytest.fixture
def template_pack():
    """A pack with one overtime template entry and one static question."""
    return ContentPack.model_validate(
        {
            "id": "mini",
            "name": "Mini",
            "questions": [
                {
                    "domain": 2,
                    "difficulty": "easy",
                    "type": "numeric",
                    "template_id": "overtime_gross_v1",
                    "params": {"rate_min": 20, "rate_max": 20, "hours_min": 45, "hours_max": 45},
                },
                {
                    "domain": 1,
                    "difficulty": "easy",
                    "type": "fill",
                    "prompt": "Form for annual wages?",
                    "answer": "W-2",
                    "fun_only": True,
                },
            ],
        }
    )


@pytest.fixture
def entry_factory():
    """Factory for static entries: entry_factory(type="numeric", answer=1.0)."""
    return make_entry
