"""Gemini-backed providers and the coordinator that feeds the farm store."""

from __future__ import annotations

from .config import FarmAIConfig, load_config
from .coordinator import AnalysisNotFoundError, FarmCoordinator
from .providers import FarmAIProvider

__all__ = [
    "AnalysisNotFoundError",
    "FarmAIConfig",
    "FarmAIProvider",
    "FarmCoordinator",
    "load_config",
]
