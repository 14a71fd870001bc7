"""Declarative question tree decision provider"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..core.decision_provider import DecisionProvider
from ..exceptions import DefinitionError
from ..models.history import History
from ..models.outcome import TERMINAL, Outcome
from ..models.question import Question
from ..parsers.yaml_loader import YAMLLoader

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = ["1.0.0"]


class BranchRule(BaseModel):
    """Routes an answered question to the next question"""
    model_config = ConfigDict(frozen=True)
    
    after: str = Field(..., description="Id of the answered question")
    when: Optional[str] = Field(None, description="Answer value to match, any value if omitted")
    next: Optional[str] = Field(None, description="Key of the next question, end of flow if omitted")
    
    def matches(self, question_id: str, value: str) -> bool:
        """Check whether rule applies to an answer"""
        return self.after == question_id and (self.when is None or self.when == value)


class QuestionTreeDefinition(BaseModel):
    """Complete question tree definition"""
    model_config = ConfigDict(frozen=True)
    
    version: str = Field(..., description="Question tree definition version")
    flow_id: str = Field(..., description="Unique flow identifier")
    initial: str = Field(..., description="Key of the first question")
    questions: Dict[str, Question] = Field(..., description="Questions keyed by tree key")
    branches: List[BranchRule] = Field(default_factory=list, description="Branch rules")
    
    @field_validator("version")
    @classmethod
    def validate_version(cls, v):
        """Validate question tree definition version"""
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported question tree version: {v}")
        return v
    
    @model_validator(mode="after")
    def validate_references(self):
        """Validate that all question references resolve"""
        if self.initial not in self.questions:
            raise ValueError(f"Initial question '{self.initial}' is not defined")
        
        question_ids = {question.id for question in self.questions.values()}
        if len(question_ids) != len(self.questions):
            raise ValueError("Duplicate question ids found in question tree")
        
        for rule in self.branches:
            if rule.after not in question_ids:
                raise ValueError(f"Branch rule references unknown question id '{rule.after}'")
            if rule.next is not None and rule.next not in self.questions:
                raise ValueError(f"Branch rule references unknown question key '{rule.next}'")
        return self


class QuestionTreeProvider(DecisionProvider):
    """Decides the next question from static branch rules
    
    The last answer selects the rule: rules naming its value win over
    wildcard rules for the same question, in definition order. A rule without
    a next key, or no matching rule, ends the flow.
    """
    
    def __init__(self, definition: QuestionTreeDefinition):
        self.definition = definition
    
    @property
    def initial_question(self) -> Question:
        return self.definition.questions[self.definition.initial]
    
    def decide(self, history: History) -> Outcome:
        last = history.last
        if last is None:
            return self.initial_question
        
        rule = self._find_rule(last.question_id, last.value)
        if rule is None or rule.next is None:
            return TERMINAL
        return self.definition.questions[rule.next]
    
    def _find_rule(self, question_id: str, value: str) -> Optional[BranchRule]:
        wildcard = None
        for rule in self.definition.branches:
            if not rule.matches(question_id, value):
                continue
            if rule.when is not None:
                return rule
            if wildcard is None:
                wildcard = rule
        return wildcard
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "<dict>") -> 'QuestionTreeProvider':
        """Build provider from a definition mapping
        
        Raises:
            DefinitionError: If the definition is invalid
        """
        try:
            definition = QuestionTreeDefinition.model_validate(data)
        except ValidationError as e:
            raise DefinitionError(f"Invalid question tree: {e}", source) from e
        logger.debug(
            f"Loaded question tree '{definition.flow_id}' with "
            f"{len(definition.questions)} questions"
        )
        return cls(definition)
    
    @classmethod
    def from_yaml(cls, file_path: Union[str, Path]) -> 'QuestionTreeProvider':
        """Load provider from a YAML definition file
        
        Raises:
            DefinitionError: If the file cannot be read or the definition is invalid
        """
        data = YAMLLoader().load(file_path)
        return cls.from_dict(data, source=str(file_path))
