import pytest

from mockinterview.interview.events import InterviewEventBus, InterviewMetrics
from mockinterview.interview.sequencer import TurnSequencer
from mockinterview.interview.testing import (
    InMemorySessionStore, MockLLMClient, MockSTTService, MockTTSService,
    make_questions_response, make_session_config
)


@pytest.fixture
def session_config():
    return make_session_config()


@pytest.fixture
def voice_config():
    return make_session_config(use_voice=True)


@pytest.fixture
def llm():
    return MockLLMClient()


@pytest.fixture
def tts():
    return MockTTSService()


@pytest.fixture
def stt():
    return MockSTTService()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def metrics():
    return InterviewMetrics()


@pytest.fixture
def event_bus(metrics):
    bus = InterviewEventBus()
    bus.subscribe_all(metrics.handle_event)
    return bus


@pytest.fixture
def sequencer(llm, tts, stt, store, event_bus):
    return TurnSequencer(llm, tts_service=tts, stt_service=stt, session_store=store, event_bus=event_bus)


@pytest.fixture
def started(sequencer, llm, session_config):
    """Sequencer with an interview already running on a five-question plan."""
    llm.queue(make_questions_response(5), "Welcome! Question 1?")
    sequencer.start(session_config)
    return sequencer
