"""Append/truncate-only answer history"""
from collections.abc import Sequence
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union, overload
from .answer import Answer


class History(Sequence):
    """Immutable ordered log of answers
    
    History[i] answers the question presented at step i. Growing and
    shrinking always return a new History, so snapshots handed to decision
    providers or held by in-flight decisions never change.
    """
    
    __slots__ = ("_answers",)
    
    def __init__(self, answers: Iterable[Answer] = ()):
        """Initialize history
        
        Args:
            answers: Answers in the order they were given
        """
        answers = tuple(answers)
        for answer in answers:
            if not isinstance(answer, Answer):
                raise TypeError(f"History entries must be Answer, got {type(answer).__name__}")
        self._answers: Tuple[Answer, ...] = answers
    
    def append(self, answer: Answer) -> 'History':
        """Return a new history with answer appended"""
        return History(self._answers + (answer,))
    
    def truncate(self, length: int) -> 'History':
        """Return a new history keeping the first length answers
        
        Raises:
            ValueError: If length is negative or exceeds the history length
        """
        if length < 0 or length > len(self._answers):
            raise ValueError(
                f"Cannot truncate history of length {len(self._answers)} to {length}"
            )
        return History(self._answers[:length])
    
    @overload
    def __getitem__(self, index: int) -> Answer: ...
    
    @overload
    def __getitem__(self, index: slice) -> 'History': ...
    
    def __getitem__(self, index: Union[int, slice]) -> Union[Answer, 'History']:
        if isinstance(index, slice):
            return History(self._answers[index])
        return self._answers[index]
    
    def __len__(self) -> int:
        return len(self._answers)
    
    def __iter__(self) -> Iterator[Answer]:
        return iter(self._answers)
    
    def __eq__(self, other: object) -> bool:
        if isinstance(other, History):
            return self._answers == other._answers
        if isinstance(other, (list, tuple)):
            return self._answers == tuple(other)
        return NotImplemented
    
    def __hash__(self) -> int:
        return hash(self._answers)
    
    def __repr__(self) -> str:
        return f"History({list(self._answers)!r})"
    
    @property
    def last(self) -> Optional[Answer]:
        """Most recent answer, or None for an empty history"""
        return self._answers[-1] if self._answers else None
    
    def find(self, question_id: str) -> Optional[Answer]:
        """Find the answer given to a question"""
        for answer in self._answers:
            if answer.question_id == question_id:
                return answer
        return None
    
    def question_ids(self) -> List[str]:
        """Ids of the answered questions in order"""
        return [answer.question_id for answer in self._answers]
    
    def answer_map(self) -> Dict[str, str]:
        """Map question ids to answer values"""
        return {answer.question_id: answer.value for answer in self._answers}
    
    def label_map(self) -> Dict[str, str]:
        """Map question ids to answer labels"""
        return {answer.question_id: answer.label for answer in self._answers}
    
    def to_list(self) -> List[Dict[str, Any]]:
        """Serialize history to a list of answer dicts"""
        return [answer.to_dict() for answer in self._answers]
    
    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> 'History':
        """Deserialize history from a list of answer dicts"""
        return cls(Answer.from_dict(item) for item in data)
