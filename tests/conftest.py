import logging

import pytest

from watson.vm.vm import VM

# Every test gets a clean view of the WATSON_* environment, and the package
# logger is put back the way the CLI tests found it (setup_logging() detaches
# it from the root logger, which would hide records from caplog).


@pytest.fixture(autouse=True)
def _clean_watson_env(monkeypatch):
    monkeypatch.delenv("WATSON_TRACE", raising=False)
    monkeypatch.delenv("WATSON_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger("watson")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def vm():
    """Fresh VM with an empty stack."""
    return VM(trace=False)


@pytest.fixture
def snapshot():
    """Deep copy of a VM's stack, for checking that failed ops changed nothing."""
    def take(machine: VM):
        return [v.clone() for v in machine.stack]
    return take
