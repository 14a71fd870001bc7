"""Answer model recording the response to a question"""
from dataclasses import dataclass
from typing import Any, Dict
from .question import Question, QuestionOption


@dataclass(frozen=True)
class Answer:
    """Immutable record of a selected option"""
    question_id: str
    value: str
    label: str
    
    @classmethod
    def from_option(cls, question: Question, option: QuestionOption) -> 'Answer':
        """Build the answer for selecting an option of a question"""
        return cls(question_id=question.id, value=option.value, label=option.label)
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize answer to dictionary"""
        return {
            "question_id": self.question_id,
            "value": self.value,
            "label": self.label
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Answer':
        """Deserialize answer from dictionary"""
        return cls(
            question_id=data["question_id"],
            value=data["value"],
            label=data["label"]
        )
