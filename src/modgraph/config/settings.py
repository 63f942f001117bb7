"""Analysis configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..core.closure import ClosureOptions
from ..core.exceptions import ConfigError
from .defaults import DEFAULT_DISTANCE_WARNING, DEFAULT_SORT_KEY, SORT_KEYS


@dataclass
class ClosureSettings:
    """Import closure parameters for the upstream/downstream aggregates."""

    include_self: bool = False
    max_depth: int | None = None  # None = fully transitive

    def to_options(self) -> ClosureOptions:
        return ClosureOptions(include_self=self.include_self, max_depth=self.max_depth)


@dataclass
class AnalysisConfig:
    """Complete analysis configuration."""

    include_std: bool = False  # Keep standard modules in the displayed graph
    structural: bool = False  # Run the structural coupling phase
    sort_by: str = DEFAULT_SORT_KEY
    workers: int = 1  # Threads for the structural phase
    exclude: list[str] = field(default_factory=list)
    distance_warning: float = DEFAULT_DISTANCE_WARNING
    closure: ClosureSettings = field(default_factory=ClosureSettings)

    def __post_init__(self) -> None:
        self.sort_by = self.sort_by.lower()
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If a value is out of range
        """
        if self.sort_by not in SORT_KEYS:
            raise ConfigError(
                f"Invalid sort key: {self.sort_by!r} (expected one of {', '.join(SORT_KEYS)})",
                context={"sort_by": self.sort_by},
            )
        if self.workers < 1:
            raise ConfigError(
                f"workers must be at least 1, got {self.workers}",
                context={"workers": self.workers},
            )
        if not 0.0 <= self.distance_warning <= 1.0:
            raise ConfigError(
                f"distance_warning must be within [0, 1], got {self.distance_warning}",
                context={"distance_warning": self.distance_warning},
            )
        if self.closure.max_depth is not None and self.closure.max_depth < 1:
            raise ConfigError(
                f"closure.max_depth must be at least 1, got {self.closure.max_depth}",
                context={"max_depth": self.closure.max_depth},
            )

    @classmethod
    def load(cls, path: Path) -> AnalysisConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            AnalysisConfig instance (defaults when the file does not exist)

        Raises:
            ConfigError: If the file is not valid YAML or holds invalid values
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML in {path}: {e}", context={"path": str(path)}
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration root must be a mapping: {path}",
                context={"path": str(path)},
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            AnalysisConfig instance

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        closure_data = data.get("closure") or {}
        try:
            closure = ClosureSettings(**closure_data)
            return cls(
                include_std=bool(data.get("include_std", False)),
                structural=bool(data.get("structural", False)),
                sort_by=str(data.get("sort_by", DEFAULT_SORT_KEY)),
                workers=int(data.get("workers", 1)),
                exclude=list(data.get("exclude") or []),
                distance_warning=float(
                    data.get("distance_warning", DEFAULT_DISTANCE_WARNING)
                ),
                closure=closure,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}", context=data) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            "include_std": self.include_std,
            "structural": self.structural,
            "sort_by": self.sort_by,
            "workers": self.workers,
            "exclude": list(self.exclude),
            "distance_warning": self.distance_warning,
            "closure": {
                "include_self": self.closure.include_self,
                "max_depth": self.closure.max_depth,
            },
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
