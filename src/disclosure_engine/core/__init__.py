"""Core question engine components"""
from .decision_provider import (
    DecisionProvider,
    CallableDecisionProvider,
    InvalidOutcomeError,
    as_decision_provider,
    normalize_outcome
)
from .loading_gate import LoadingGate
from .observer import (
    DisclosureFlowObserver,
    QuestionPresented,
    DecisionRequested,
    FlowCompleted,
    FaultRaised,
    FlowTransition,
    NavigationDirection
)
from .engine import QuestionEngine, EngineState, EngineSnapshot

__all__ = [
    "DecisionProvider",
    "CallableDecisionProvider",
    "InvalidOutcomeError",
    "as_decision_provider",
    "normalize_outcome",
    "LoadingGate",
    "DisclosureFlowObserver",
    "QuestionPresented",
    "DecisionRequested",
    "FlowCompleted",
    "FaultRaised",
    "FlowTransition",
    "NavigationDirection",
    "QuestionEngine",
    "EngineState",
    "EngineSnapshot"
]
