"""
Shared fixtures for the counterflow test suite.

Engines use a short reset delay so deferred-reset scenarios finish quickly;
tests wait a multiple of RESET_DELAY to let a reset fire.
"""

import pytest
import pytest_asyncio

from counterflow.app.audit import AuditRecorder
from counterflow.app.bus import InProcessStateStream
from counterflow.config import EngineConfig
from counterflow.core.engine import CounterEngine
from counterflow.persistence.memory import MemoryAuditLog

RESET_DELAY = 0.05


@pytest.fixture
def engine_config():
    return EngineConfig(reset_delay=RESET_DELAY)


@pytest.fixture
def audit_log():
    return MemoryAuditLog()


@pytest.fixture
def recorder(audit_log):
    return AuditRecorder(audit_log)


@pytest_asyncio.fixture
async def engine(engine_config, recorder):
    """Engine starting at 0 with an in-memory audit log."""
    engine = CounterEngine(config=engine_config, stream=InProcessStateStream(), audit=recorder)
    yield engine
    await engine.aclose()


@pytest.fixture
def published(engine):
    """Every snapshot published after the fixture is requested."""
    states = []
    engine.stream.subscribe(states.append)
    return states
