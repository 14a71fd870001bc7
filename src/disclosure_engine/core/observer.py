"""Observer pattern for question engine events"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict
from ..exceptions import DisclosureError
from ..models.history import History
from ..models.question import Question


class FlowTransition(str, Enum):
    """Kind of transition that led to the presented question"""
    FORWARD = "forward"
    BACKWARD = "backward"
    RESET = "reset"


class NavigationDirection(str, Enum):
    """Direction of a pending decision"""
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class QuestionPresented:
    """Emitted when a question becomes the current question"""
    question: Question
    history: History
    transition: FlowTransition
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize notification to dict"""
        return {
            "type": "QuestionPresented",
            "question": self.question.to_dict(),
            "history": self.history.to_list(),
            "transition": self.transition.value
        }


@dataclass
class DecisionRequested:
    """Emitted when the decision provider is invoked"""
    history: History
    direction: NavigationDirection
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize notification to dict"""
        return {
            "type": "DecisionRequested",
            "history": self.history.to_list(),
            "direction": self.direction.value
        }


@dataclass
class FlowCompleted:
    """Emitted once when the provider ends the flow"""
    history: History
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize notification to dict"""
        return {
            "type": "FlowCompleted",
            "history": self.history.to_list()
        }


@dataclass
class FaultRaised:
    """Emitted when a navigation fault is reported"""
    fault: DisclosureError
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize notification to dict"""
        return {
            "type": "FaultRaised",
            "kind": self.fault.kind.value,
            "message": self.fault.message
        }


# Union type for all notification types
QuestionEngineNotification = (
    QuestionPresented |
    DecisionRequested |
    FlowCompleted |
    FaultRaised
)


class DisclosureFlowObserver(ABC):
    """Abstract base class for question engine observers"""
    
    @abstractmethod
    async def receive_notification_async(
        self,
        notification: QuestionEngineNotification
    ) -> None:
        """Handle notification from engine
        
        Args:
            notification: Event notification from engine
        """
        pass
