"""Outcome of a decision: the next question or the terminal marker"""
from typing import Union
from .question import Question


class Terminal:
    """Marker outcome signaling that the flow has no further question"""
    
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __repr__(self) -> str:
        return "TERMINAL"
    
    def __bool__(self) -> bool:
        return False


TERMINAL = Terminal()

Outcome = Union[Question, Terminal]


def is_terminal(outcome: object) -> bool:
    """Check whether an outcome ends the flow"""
    return outcome is TERMINAL
