import pytest

from pocketusage.lifecycle import reset_all


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Drop global services between tests."""
    yield
    reset_all()
