import pytest

import tsdoc.utils.logging as log


@pytest.fixture(autouse=True)
def _stop_progress():
    yield
    log.stop()
