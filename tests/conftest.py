import pytest

from verstamp import events
from verstamp.util import log


@pytest.fixture
def captured_events():
    names = [
        events.UPDATE_STARTED,
        events.STATE_ENTERED,
        events.UPDATE_FAILED,
        events.UPDATE_FINISHED,
        events.PHASE_STARTED,
        events.PHASE_FINISHED,
        events.PHASE_FAILED,
    ]
    captured = []

    def receiver(_sender, **kw):
        captured.append(kw)

    for name in names:
        events.signal(name).connect(receiver)
    yield captured
    for name in names:
        events.signal(name).disconnect(receiver)

@pytest.fixture(autouse=True)
def reset_log_level():
    yield
    log.set_default_level("INFO")
