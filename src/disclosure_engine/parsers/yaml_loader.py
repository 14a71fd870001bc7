"""Loader for YAML definition files."""

from pathlib import Path
from typing import Any, Dict, Union
import yaml

from ..exceptions import DefinitionError


class YAMLLoader:
    """Loads YAML mappings using PyYAML with safe_load."""

    def load(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """Load YAML file.
        
        Args:
            file_path: Path to YAML file
            
        Returns:
            Dictionary containing parsed YAML data, or empty dict if file is empty
            
        Raises:
            DefinitionError: If the file is missing, malformed, or not a mapping
        """
        path = Path(file_path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise DefinitionError(f"Definition file not found: {path}", str(path)) from e
        except yaml.YAMLError as e:
            raise DefinitionError(f"Malformed YAML: {e}", str(path)) from e
        
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise DefinitionError(
                f"Expected a mapping at top level, got {type(data).__name__}",
                str(path)
            )
        return data
