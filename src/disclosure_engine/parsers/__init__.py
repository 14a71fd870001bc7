"""Parser layer for disclosure engine."""

from .yaml_loader import YAMLLoader

__all__ = ["YAMLLoader"]
