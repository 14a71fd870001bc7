"""Disclosure Engine Exception Classes

Fault hierarchy for the question navigation engine.
Navigation faults are delivered through the engine's fault channel rather
than raised; loader errors are raised directly.
All custom exceptions include help_text for actionable caller guidance.
"""

from enum import Enum
from typing import List, Optional


class FaultKind(str, Enum):
    """Classification of navigation faults"""
    INVALID_OPTION = "invalid_option"
    BUSY = "busy"
    PROVIDER_FAILURE = "provider_failure"
    PROVIDER_INCONSISTENCY = "provider_inconsistency"
    INVALID_NAVIGATION = "invalid_navigation"
    DEFINITION = "definition"


class DisclosureError(Exception):
    """Base exception for all disclosure engine errors
    
    Attributes:
        message: Human-readable error description
        help_text: Optional actionable guidance for resolving the error
    """
    
    kind: FaultKind = FaultKind.INVALID_NAVIGATION
    
    def __init__(self, message: str, help_text: Optional[str] = None):
        """Initialize error with message and optional help text
        
        Args:
            message: Error description
            help_text: Optional remediation guidance
        """
        self.message = message
        self.help_text = help_text
        super().__init__(message)
    
    def __str__(self) -> str:
        """Format error message with help text if available"""
        if self.help_text:
            return f"{self.message}\n\nHelp: {self.help_text}"
        return self.message


class InvalidOptionError(DisclosureError):
    """Reported when a selected option does not belong to the current question"""
    
    kind = FaultKind.INVALID_OPTION
    
    def __init__(
        self,
        question_id: Optional[str],
        option_value: str,
        valid_values: Optional[List[str]] = None
    ):
        """Initialize invalid option error
        
        Args:
            question_id: Id of the question being answered
            option_value: Value of the rejected option
            valid_values: Option values the question accepts
        """
        message = f"Option '{option_value}' is not an option of question '{question_id}'"
        
        help_text = None
        if valid_values:
            help_text = "Valid options:\n" + "\n".join(f"  - {value}" for value in valid_values)
        
        super().__init__(message, help_text)
        self.question_id = question_id
        self.option_value = option_value
        self.valid_values = valid_values or []


class BusyError(DisclosureError):
    """Reported when navigation is requested while a decision is pending"""
    
    kind = FaultKind.BUSY
    
    def __init__(self, operation: str):
        message = f"Cannot {operation} while the next question is being decided"
        help_text = "Disable navigation controls while the engine is busy"
        super().__init__(message, help_text)
        self.operation = operation


class ProviderFailureError(DisclosureError):
    """Reported when the decision provider raises or returns an invalid outcome
    
    The failed step is rolled back, so the same navigation can be retried.
    The underlying error is available as __cause__.
    """
    
    kind = FaultKind.PROVIDER_FAILURE
    
    def __init__(self, direction: str, history_length: int, reason: Optional[str] = None):
        """Initialize provider failure error
        
        Args:
            direction: Navigation direction that triggered the decision
            history_length: Length of the history the provider was called with
            reason: Optional description of the failure
        """
        message = (
            f"Decision provider failed for {direction} navigation "
            f"(history length {history_length})"
        )
        if reason:
            message += f": {reason}"
        
        help_text = "The step was rolled back; retry the same navigation"
        
        super().__init__(message, help_text)
        self.direction = direction
        self.history_length = history_length
        self.reason = reason


class ProviderInconsistencyError(DisclosureError):
    """Reported when back navigation recomputes a different outcome
    
    A deterministic provider must return, for a shorter history, the same
    question that was presented at that depth before.
    """
    
    kind = FaultKind.PROVIDER_INCONSISTENCY
    
    def __init__(
        self,
        reason: str,
        expected_question_id: Optional[str] = None,
        actual_question_id: Optional[str] = None
    ):
        """Initialize provider inconsistency error
        
        Args:
            reason: Description of the inconsistency
            expected_question_id: Question id previously presented at this depth
            actual_question_id: Question id returned by the recomputation
        """
        message = f"Decision provider is inconsistent: {reason}"
        
        help_text = (
            "Supply a deterministic decision provider with set_decision_provider() "
            "and call retry_async(), or reset the flow"
        )
        if expected_question_id and actual_question_id:
            help_text += f"\n\nExpected: {expected_question_id}\nActual: {actual_question_id}"
        
        super().__init__(message, help_text)
        self.reason = reason
        self.expected_question_id = expected_question_id
        self.actual_question_id = actual_question_id


class InvalidNavigationError(DisclosureError):
    """Reported when a navigation operation's precondition does not hold"""
    
    kind = FaultKind.INVALID_NAVIGATION
    
    def __init__(self, operation: str, reason: str):
        message = f"Cannot {operation}: {reason}"
        help_text = "Call reset_async() to start the flow again"
        super().__init__(message, help_text)
        self.operation = operation
        self.reason = reason


class DefinitionError(DisclosureError):
    """Raised when a question tree or settings definition is invalid"""
    
    kind = FaultKind.DEFINITION
    
    def __init__(self, message: str, source: Optional[str] = None):
        help_text = None
        if source:
            help_text = f"Check the definition in {source}"
        super().__init__(message, help_text)
        self.source = source
