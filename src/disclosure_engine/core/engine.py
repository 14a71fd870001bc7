"""QuestionEngine: state machine driving a guided disclosure flow"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from ..config import EngineSettings
from ..exceptions import (
    BusyError,
    DisclosureError,
    InvalidNavigationError,
    InvalidOptionError,
    ProviderFailureError,
    ProviderInconsistencyError,
)
from ..models.answer import Answer
from ..models.history import History
from ..models.outcome import Outcome, is_terminal
from ..models.question import Question, QuestionOption
from .decision_provider import DecisionProvider, InvalidOutcomeError, as_decision_provider, normalize_outcome
from .loading_gate import LoadingGate
from .observer import (
    DecisionRequested,
    DisclosureFlowObserver,
    FaultRaised,
    FlowCompleted,
    FlowTransition,
    NavigationDirection,
    QuestionPresented,
)

logger = logging.getLogger(__name__)

CompletionHook = Callable[[History], Union[None, Awaitable[None]]]
FaultHook = Callable[[DisclosureError], Union[None, Awaitable[None]]]


class EngineState(str, Enum):
    """Logical state of the question engine"""
    PRESENTING = "presenting"
    AWAITING_DECISION = "awaiting_decision"
    COMPLETE = "complete"
    INCONSISTENT = "inconsistent"


@dataclass(frozen=True)
class EngineSnapshot:
    """Observable engine output consumed by the presentation layer"""
    state: EngineState
    question: Optional[Question]
    history: History
    busy: bool
    pending_direction: Optional[NavigationDirection]
    last_transition: Optional[FlowTransition]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize snapshot to dictionary"""
        return {
            "state": self.state.value,
            "question": self.question.to_dict() if self.question else None,
            "history": self.history.to_list(),
            "busy": self.busy,
            "pending_direction": self.pending_direction.value if self.pending_direction else None,
            "last_transition": self.last_transition.value if self.last_transition else None
        }


@dataclass(frozen=True)
class _PendingDecision:
    """Tag for an outstanding provider call"""
    run_id: int
    history: History
    direction: NavigationDirection
    expected_question_id: Optional[str]


@dataclass(frozen=True)
class _Checkpoint:
    """Presenting state restored when a decision fails"""
    state: EngineState
    question: Optional[Question]
    history: History


class QuestionEngine:
    """Presents questions one at a time and navigates over the answer history

    The engine owns the History and the current question. The next question
    is computed by the injected DecisionProvider from the complete history,
    through a LoadingGate that keeps the busy signal up for a minimum time.
    Back navigation recomputes the previous question from the truncated
    history instead of replaying a cache.

    Navigation faults are never raised: they are reported to on_fault, to
    observers, and to the log, and leave the engine in a consistent state.
    """

    def __init__(
        self,
        initial_question: Question,
        decision_provider: Union[DecisionProvider, Callable[[History], Any]],
        on_complete: Optional[CompletionHook] = None,
        on_fault: Optional[FaultHook] = None,
        settings: Optional[EngineSettings] = None,
        loading_gate: Optional[LoadingGate] = None
    ):
        """Initialize engine in Presenting(initial_question, [])

        Args:
            initial_question: First question of every run
            decision_provider: DecisionProvider or function history -> outcome
            on_complete: Called once per completed run with the final history
            on_fault: Called with each navigation fault
            settings: Engine settings (defaults apply when omitted). When given,
                its minimum busy duration overrides the loading gate's own
            loading_gate: Gate used around provider calls; without explicit
                settings its own minimum duration applies

        Raises:
            TypeError: If initial_question is not a Question or the provider is not callable
        """
        if not isinstance(initial_question, Question):
            raise TypeError(
                f"initial_question must be a Question, got {type(initial_question).__name__}"
            )

        self.settings = settings or EngineSettings()
        self._initial_question = initial_question
        self._provider = as_decision_provider(decision_provider)
        self._on_complete = on_complete
        self._on_fault = on_fault
        self._gate = loading_gate or LoadingGate(self.settings.min_busy_duration_ms)
        self._min_duration_override = settings.min_busy_duration_ms if settings is not None else None

        # Navigation state
        self._state = EngineState.PRESENTING
        self._current_question: Optional[Question] = initial_question
        self._history = History()
        self._last_transition: Optional[FlowTransition] = None

        # Run bookkeeping for dropping stale decisions
        self._run_id = 0
        self._pending: Optional[_PendingDecision] = None
        self._completed_run_id: Optional[int] = None
        self._expected_question_id: Optional[str] = None

        self._observers: List[DisclosureFlowObserver] = []

    # Observable output

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def current_question(self) -> Optional[Question]:
        """Question awaiting an answer, only while presenting"""
        if self._state is EngineState.PRESENTING:
            return self._current_question
        return None

    @property
    def history(self) -> History:
        return self._history

    @property
    def initial_question(self) -> Question:
        return self._initial_question

    @property
    def is_busy(self) -> bool:
        """Whether a decision for the current run is pending behind the gate"""
        return self._pending is not None and self._gate.busy

    @property
    def pending_direction(self) -> Optional[NavigationDirection]:
        return self._pending.direction if self._pending else None

    @property
    def last_transition(self) -> Optional[FlowTransition]:
        return self._last_transition

    @property
    def loading_gate(self) -> LoadingGate:
        return self._gate

    def snapshot(self) -> EngineSnapshot:
        """Capture the current observable state"""
        return EngineSnapshot(
            state=self._state,
            question=self.current_question,
            history=self._history,
            busy=self.is_busy,
            pending_direction=self.pending_direction,
            last_transition=self._last_transition
        )

    # Observers

    def register_observer(self, observer: DisclosureFlowObserver) -> None:
        """Register observer for engine events"""
        if observer not in self._observers:
            self._observers.append(observer)

    def deregister_observer(self, observer: DisclosureFlowObserver) -> None:
        """Deregister observer from engine events"""
        if observer in self._observers:
            self._observers.remove(observer)

    async def _notify_observers(self, notification: Any) -> None:
        """Notify all registered observers of event"""
        for observer in list(self._observers):
            try:
                await observer.receive_notification_async(notification)
            except Exception:
                logger.exception(
                    f"Observer {observer.__class__.__name__} failed on "
                    f"{notification.__class__.__name__}"
                )

    async def _call_hook(self, hook: Optional[Callable[..., Any]], name: str, argument: Any) -> None:
        if hook is None:
            return
        try:
            result = hook(argument)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"{name} hook failed")

    async def _report_fault(self, fault: DisclosureError) -> None:
        logger.warning(f"{fault.kind.value}: {fault.message}")
        await self._call_hook(self._on_fault, "on_fault", fault)
        await self._notify_observers(FaultRaised(fault=fault))

    # Lifecycle

    def set_decision_provider(
        self,
        decision_provider: Union[DecisionProvider, Callable[[History], Any]]
    ) -> None:
        """Replace the decision provider used for subsequent decisions"""
        self._provider = as_decision_provider(decision_provider)

    def _begin_run(self, initial_question: Optional[Question]) -> None:
        if initial_question is not None:
            self._initial_question = initial_question

        if self._pending is not None:
            logger.debug("Discarding pending decision of previous run")

        self._run_id += 1
        self._pending = None
        self._expected_question_id = None
        self._history = History()
        self._current_question = self._initial_question
        self._state = EngineState.PRESENTING
        self._last_transition = FlowTransition.RESET

    async def start_async(self, initial_question: Optional[Question] = None) -> None:
        """Start a fresh run at the initial question with an empty history

        Any decision still in flight is discarded when it resolves.

        Args:
            initial_question: Optional replacement for the initial question
        """
        if initial_question is not None and not isinstance(initial_question, Question):
            await self._report_fault(
                InvalidNavigationError(
                    "start",
                    f"initial question must be a Question, got {type(initial_question).__name__}"
                )
            )
            return

        self._begin_run(initial_question)
        logger.debug(f"Flow started at question '{self._initial_question.id}'")
        await self._notify_observers(
            QuestionPresented(
                question=self._initial_question,
                history=self._history,
                transition=FlowTransition.RESET
            )
        )

    async def reset_async(self) -> None:
        """Return to the initial question with an empty history"""
        await self.start_async()

    def close(self) -> None:
        """Tear down the current run

        Drops any pending decision and discards the history without
        notifying observers.
        """
        self._begin_run(None)
        self._last_transition = None

    # Navigation

    async def select_option_async(self, option: Union[QuestionOption, str]) -> None:
        """Answer the current question and advance

        Args:
            option: Option of the current question, or its value
        """
        if not await self._check_navigable("select an option"):
            return

        question = self.current_question
        if question is None:
            await self._report_fault(
                InvalidNavigationError("select an option", "no question is presented")
            )
            return

        selected = question.find_option(option)
        if selected is None:
            value = option.value if isinstance(option, QuestionOption) else str(option)
            await self._report_fault(
                InvalidOptionError(question.id, value, list(question.option_values()))
            )
            return

        answer = Answer.from_option(question, selected)
        await self._decide_async(
            self._history.append(answer),
            NavigationDirection.FORWARD,
            expected_question_id=None
        )

    async def go_back_async(self) -> None:
        """Return to the previous question by recomputing it"""
        if not await self._check_navigable("go back"):
            return

        if not self._history:
            await self._report_fault(
                InvalidNavigationError("go back", "the history is empty")
            )
            return

        removed = self._history.last
        truncated = self._history.truncate(len(self._history) - 1)

        if not truncated:
            self._history = truncated
            self._expected_question_id = None
            await self._present(self._initial_question, FlowTransition.BACKWARD)
            return

        await self._decide_async(
            truncated,
            NavigationDirection.BACKWARD,
            expected_question_id=removed.question_id
        )

    async def retry_async(self) -> None:
        """Recompute the question for the current history after an inconsistency"""
        if self._state is EngineState.AWAITING_DECISION:
            await self._report_fault(BusyError("retry"))
            return
        if self._state is not EngineState.INCONSISTENT:
            await self._report_fault(
                InvalidNavigationError("retry", "the flow is not inconsistent")
            )
            return

        if not self._history:
            self._expected_question_id = None
            await self._present(self._initial_question, FlowTransition.BACKWARD)
            return

        await self._decide_async(
            self._history,
            NavigationDirection.BACKWARD,
            expected_question_id=self._expected_question_id
        )

    async def _check_navigable(self, operation: str) -> bool:
        if self._state is EngineState.AWAITING_DECISION:
            await self._report_fault(BusyError(operation))
            return False
        if self._state is EngineState.COMPLETE:
            await self._report_fault(
                InvalidNavigationError(operation, "the flow is complete")
            )
            return False
        return True

    # Decisions

    async def _decide_async(
        self,
        history: History,
        direction: NavigationDirection,
        expected_question_id: Optional[str]
    ) -> None:
        checkpoint = _Checkpoint(
            state=self._state,
            question=self._current_question,
            history=self._history
        )
        pending = _PendingDecision(
            run_id=self._run_id,
            history=history,
            direction=direction,
            expected_question_id=expected_question_id
        )

        self._pending = pending
        self._history = history
        self._state = EngineState.AWAITING_DECISION
        await self._notify_observers(DecisionRequested(history=history, direction=direction))

        provider = self._provider
        try:
            raw_outcome = await self._gate.run_gated(
                lambda: provider.decide(history),
                self._min_duration_override
            )
            outcome = normalize_outcome(raw_outcome)
        except asyncio.CancelledError:
            if not self._is_stale(pending):
                logger.debug(f"Cancelled {direction.value} decision, restoring previous question")
                self._pending = None
                self._restore(checkpoint)
            raise
        except Exception as e:
            if self._is_stale(pending):
                logger.debug(f"Dropping failure of stale {direction.value} decision: {e}")
                return
            self._pending = None
            self._restore(checkpoint)
            reason = str(e) if isinstance(e, InvalidOutcomeError) else f"{e.__class__.__name__}: {e}"
            fault = ProviderFailureError(direction.value, len(history), reason)
            fault.__cause__ = e
            await self._report_fault(fault)
            return

        if self._is_stale(pending):
            logger.debug(f"Dropping stale {direction.value} decision for history of length {len(history)}")
            return

        self._pending = None
        if direction is NavigationDirection.FORWARD:
            await self._apply_forward(outcome)
        else:
            await self._apply_backward(outcome, expected_question_id)

    def _is_stale(self, pending: _PendingDecision) -> bool:
        return (
            self._pending is not pending
            or pending.run_id != self._run_id
            or self._history is not pending.history
        )

    def _restore(self, checkpoint: _Checkpoint) -> None:
        self._state = checkpoint.state
        self._current_question = checkpoint.question
        self._history = checkpoint.history

    async def _apply_forward(self, outcome: Outcome) -> None:
        if is_terminal(outcome):
            await self._complete()
            return
        await self._present(outcome, FlowTransition.FORWARD)

    async def _apply_backward(self, outcome: Outcome, expected_question_id: Optional[str]) -> None:
        if is_terminal(outcome):
            await self._mark_inconsistent(
                ProviderInconsistencyError(
                    f"flow ended for a history of length {len(self._history)} "
                    f"that previously continued",
                    expected_question_id=expected_question_id
                ),
                expected_question_id
            )
            return

        if (
            self.settings.verify_back_navigation
            and expected_question_id is not None
            and outcome.id != expected_question_id
        ):
            await self._mark_inconsistent(
                ProviderInconsistencyError(
                    f"back navigation produced question '{outcome.id}' "
                    f"instead of '{expected_question_id}'",
                    expected_question_id=expected_question_id,
                    actual_question_id=outcome.id
                ),
                expected_question_id
            )
            return

        self._expected_question_id = None
        await self._present(outcome, FlowTransition.BACKWARD)

    async def _present(self, question: Question, transition: FlowTransition) -> None:
        self._current_question = question
        self._state = EngineState.PRESENTING
        self._last_transition = transition
        logger.debug(
            f"Presenting question '{question.id}' ({transition.value}, "
            f"history length {len(self._history)})"
        )
        await self._notify_observers(
            QuestionPresented(question=question, history=self._history, transition=transition)
        )

    async def _mark_inconsistent(
        self,
        fault: ProviderInconsistencyError,
        expected_question_id: Optional[str]
    ) -> None:
        self._current_question = None
        self._state = EngineState.INCONSISTENT
        self._expected_question_id = expected_question_id
        await self._report_fault(fault)

    async def _complete(self) -> None:
        self._current_question = None
        self._state = EngineState.COMPLETE
        self._last_transition = FlowTransition.FORWARD

        if self._completed_run_id == self._run_id:
            return
        self._completed_run_id = self._run_id

        final_history = self._history
        logger.info(f"Flow completed after {len(final_history)} answers")
        await self._call_hook(self._on_complete, "on_complete", final_history)
        await self._notify_observers(FlowCompleted(history=final_history))
