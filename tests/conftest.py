import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    # The CLI binds structlog to the stderr of the test that ran it.
    yield
    structlog.reset_defaults()

