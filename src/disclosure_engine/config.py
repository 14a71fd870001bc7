"""Engine settings"""

from pathlib import Path
from typing import Any, Dict, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DefinitionError
from .parsers.yaml_loader import YAMLLoader

DEFAULT_MIN_DURATION_MS = 500


class EngineSettings(BaseModel):
    """Tunable behaviour of the question engine."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    min_busy_duration_ms: int = Field(
        DEFAULT_MIN_DURATION_MS,
        ge=0,
        description="Minimum time the busy signal stays asserted per decision"
    )
    verify_back_navigation: bool = Field(
        True,
        description="Check that back navigation recomputes the previously shown question"
    )
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "<dict>") -> 'EngineSettings':
        """Build settings from a mapping, optionally nested under an 'engine' key
        
        Raises:
            DefinitionError: If the settings are invalid
        """
        section = data.get("engine", data)
        if not isinstance(section, dict):
            raise DefinitionError("'engine' section must be a mapping", source)
        try:
            return cls.model_validate(section)
        except ValidationError as e:
            raise DefinitionError(f"Invalid engine settings: {e}", source) from e
    
    @classmethod
    def from_yaml(cls, file_path: Union[str, Path]) -> 'EngineSettings':
        """Load settings from a YAML file
        
        Raises:
            DefinitionError: If the file cannot be read or the settings are invalid
        """
        data = YAMLLoader().load(file_path)
        return cls.from_dict(data, source=str(file_path))
