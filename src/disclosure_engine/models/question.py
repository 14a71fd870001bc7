"""Question and QuestionOption models"""
from typing import Any, Dict, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuestionOption(BaseModel):
    """Selectable option of a question"""
    model_config = ConfigDict(frozen=True)
    
    value: str = Field(..., description="Opaque token, unique within its question")
    label: str = Field(..., description="Display text")


class Question(BaseModel):
    """Multiple-choice question presented by the engine"""
    model_config = ConfigDict(frozen=True)
    
    id: str = Field(..., min_length=1, description="Unique question identifier")
    title: str = Field(..., min_length=1, description="Question title")
    description: Optional[str] = Field(None, description="Optional question description")
    options: Tuple[QuestionOption, ...] = Field(..., description="Ordered question options")
    
    @field_validator("options")
    @classmethod
    def validate_options(cls, v):
        """Validate options are non-empty and option values are unique"""
        if not v:
            raise ValueError("Question must have at least one option")
        values = [option.value for option in v]
        if len(values) != len(set(values)):
            raise ValueError("Duplicate option values found in question")
        return v
    
    def option_values(self) -> Tuple[str, ...]:
        """Get option values in presentation order"""
        return tuple(option.value for option in self.options)
    
    def find_option(self, option: Union[QuestionOption, str]) -> Optional[QuestionOption]:
        """Find the member option matching an option or option value
        
        Args:
            option: QuestionOption instance or its value
            
        Returns:
            The matching option of this question, or None if not a member
        """
        for candidate in self.options:
            if isinstance(option, QuestionOption):
                if candidate == option:
                    return candidate
            elif candidate.value == option:
                return candidate
        return None
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialize question to dictionary"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "options": [{"value": o.value, "label": o.label} for o in self.options]
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        """Deserialize question from dictionary"""
        return cls.model_validate(data)
