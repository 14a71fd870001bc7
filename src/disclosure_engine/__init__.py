"""Disclosure Engine - guided multi-step question navigation"""

__version__ = "0.1.0"

from .config import EngineSettings
from .exceptions import (
    DisclosureError,
    FaultKind,
    InvalidOptionError,
    BusyError,
    ProviderFailureError,
    ProviderInconsistencyError,
    InvalidNavigationError,
    DefinitionError
)
from .models import Answer, History, Question, QuestionOption, TERMINAL, Outcome, is_terminal
from .core import (
    DecisionProvider,
    CallableDecisionProvider,
    LoadingGate,
    QuestionEngine,
    EngineState,
    EngineSnapshot,
    DisclosureFlowObserver,
    FlowTransition,
    NavigationDirection
)
from .providers import QuestionTreeProvider

__all__ = [
    "EngineSettings",
    "DisclosureError",
    "FaultKind",
    "InvalidOptionError",
    "BusyError",
    "ProviderFailureError",
    "ProviderInconsistencyError",
    "InvalidNavigationError",
    "DefinitionError",
    "Answer",
    "History",
    "Question",
    "QuestionOption",
    "TERMINAL",
    "Outcome",
    "is_terminal",
    "DecisionProvider",
    "CallableDecisionProvider",
    "LoadingGate",
    "QuestionEngine",
    "EngineState",
    "EngineSnapshot",
    "DisclosureFlowObserver",
    "FlowTransition",
    "NavigationDirection",
    "QuestionTreeProvider",
]
