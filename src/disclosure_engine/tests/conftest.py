"""Pytest configuration, Hypothesis settings and shared engine fixtures"""
import asyncio
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from hypothesis import settings, Verbosity

from disclosure_engine.config import EngineSettings
from disclosure_engine.core.decision_provider import DecisionProvider
from disclosure_engine.core.observer import DisclosureFlowObserver
from disclosure_engine.models.history import History
from disclosure_engine.models.outcome import TERMINAL, Outcome
from disclosure_engine.models.question import Question, QuestionOption

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load default profile
settings.load_profile("default")

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_question(question_id: str, *options: str, title: Optional[str] = None) -> Question:
    """Build a question whose option labels are the upper-cased values"""
    return Question(
        id=question_id,
        title=title or f"Question {question_id}",
        options=tuple(QuestionOption(value=value, label=value.upper()) for value in options)
    )


FLOOR_QUESTION = Question(
    id="floor",
    title="Which floor are you on?",
    options=(
        QuestionOption(value="1", label="1F"),
        QuestionOption(value="2", label="2F"),
    )
)

TYPE_QUESTION = Question(
    id="type",
    title="What are you near?",
    options=(
        QuestionOption(value="a", label="A"),
        QuestionOption(value="b", label="B"),
    )
)


class FakeClock:
    """Monotonic clock advanced only by fake sleeps and simulated work"""
    
    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: List[float] = []
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds
    
    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class CheckingProvider(DecisionProvider):
    """Deterministic provider that fails fast on histories it could not have produced
    
    Every answer in a history must answer the question this provider returns
    for the preceding prefix (the initial question for the first answer).
    """
    
    def __init__(self, initial: Question, decide_func: Callable[[History], Outcome]):
        self.initial = initial
        self.decide_func = decide_func
        self.calls: List[History] = []
        self.violations: List[str] = []
        self._outcomes: Dict[History, Outcome] = {}
    
    def _outcome(self, history: History) -> Outcome:
        if history not in self._outcomes:
            self._outcomes[history] = self.decide_func(history)
        return self._outcomes[history]
    
    def decide(self, history: History) -> Outcome:
        self.calls.append(history)
        for index, answer in enumerate(history):
            expected = self.initial if index == 0 else self._outcome(history[:index])
            if expected is TERMINAL or answer.question_id != expected.id:
                violation = f"answer {index} of {history!r} does not match the presented question"
                self.violations.append(violation)
                raise AssertionError(violation)
        
        outcome = self.decide_func(history)
        if history in self._outcomes and self._outcomes[history] != outcome:
            violation = f"non-deterministic outcome for {history!r}"
            self.violations.append(violation)
            raise AssertionError(violation)
        self._outcomes[history] = outcome
        return outcome


class RecordingObserver(DisclosureFlowObserver):
    """Observer that keeps every notification"""
    
    def __init__(self):
        self.notifications = []
    
    async def receive_notification_async(self, notification) -> None:
        self.notifications.append(notification)
    
    def of_type(self, notification_type) -> list:
        return [n for n in self.notifications if isinstance(n, notification_type)]


def scenario_decide(history: History) -> Outcome:
    """Floor, then type, then done"""
    if len(history) == 1:
        return TYPE_QUESTION
    return TERMINAL


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_settings() -> EngineSettings:
    """Settings without a minimum busy duration"""
    return EngineSettings(min_busy_duration_ms=0)


@pytest.fixture
def scenario_provider() -> CheckingProvider:
    return CheckingProvider(FLOOR_QUESTION, scenario_decide)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
