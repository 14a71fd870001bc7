"""Data models for the disclosure engine"""
from .question import Question, QuestionOption
from .answer import Answer
from .history import History
from .outcome import TERMINAL, Outcome, Terminal, is_terminal

__all__ = [
    "Question",
    "QuestionOption",
    "Answer",
    "History",
    "TERMINAL",
    "Outcome",
    "Terminal",
    "is_terminal",
]
