"""Decision provider contract consumed by the question engine"""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Union
from pydantic import ValidationError
from ..models.history import History
from ..models.outcome import TERMINAL, Outcome, Terminal
from ..models.question import Question


OutcomeResult = Union[Outcome, Awaitable[Outcome], None]


class InvalidOutcomeError(ValueError):
    """Raised when a decision provider returns a value that is not an outcome"""


class DecisionProvider(ABC):
    """Computes the next question from the complete answer history
    
    Implementations must honor three obligations the engine relies on but
    cannot verify:
    
    - Determinism: value-equal histories yield value-equal outcomes, so
      back navigation can recompute earlier questions instead of caching them.
    - No side effects on history: lookups are read-only and the history
      argument is never retained across calls.
    - Totality: every history reachable through forward navigation yields a
      Question or TERMINAL.
    """
    
    @abstractmethod
    def decide(self, history: History) -> OutcomeResult:
        """Decide the next question
        
        Args:
            history: Snapshot of the answers given so far
            
        Returns:
            Next Question, or TERMINAL when the flow is finished. May be
            returned directly or through an awaitable.
        """
        pass


class CallableDecisionProvider(DecisionProvider):
    """Adapts a plain or async function to the DecisionProvider interface"""
    
    def __init__(self, func: Callable[[History], OutcomeResult]):
        self.func = func
    
    def decide(self, history: History) -> OutcomeResult:
        return self.func(history)
    
    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CallableDecisionProvider({name})"


def as_decision_provider(provider: Any) -> DecisionProvider:
    """Wrap a callable as a DecisionProvider if needed
    
    Raises:
        TypeError: If provider is neither a DecisionProvider nor callable
    """
    if isinstance(provider, DecisionProvider):
        return provider
    if callable(provider):
        return CallableDecisionProvider(provider)
    raise TypeError(
        f"Decision provider must be a DecisionProvider or callable, got {type(provider).__name__}"
    )


def normalize_outcome(value: Any) -> Outcome:
    """Convert a provider's return value into an Outcome
    
    None and TERMINAL end the flow, Question instances pass through and
    mappings are validated into Questions.
    
    Raises:
        InvalidOutcomeError: If value cannot be interpreted as an outcome
    """
    if value is None or isinstance(value, Terminal):
        return TERMINAL
    if isinstance(value, Question):
        return value
    if isinstance(value, Mapping):
        try:
            return Question.from_dict(dict(value))
        except ValidationError as e:
            raise InvalidOutcomeError(f"Invalid question returned: {e}") from e
    raise InvalidOutcomeError(
        f"Expected Question or TERMINAL, got {type(value).__name__}"
    )
