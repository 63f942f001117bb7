"""Configuration for modgraph analysis runs."""

from .settings import AnalysisConfig, ClosureSettings

__all__ = ["AnalysisConfig", "ClosureSettings"]
