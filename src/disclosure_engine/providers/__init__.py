"""Reusable decision providers"""
from .question_tree import BranchRule, QuestionTreeDefinition, QuestionTreeProvider

__all__ = ["BranchRule", "QuestionTreeDefinition", "QuestionTreeProvider"]
