"""Default configurations for modgraph."""

# Directories skipped while discovering source modules
DEFAULT_IGNORE_PATTERNS = [
    # Version control
    ".git",
    ".hg",
    ".svn",
    # Python caches and environments
    "__pycache__",
    ".hypothesis",
    ".mypy_cache",
    ".nox",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
    ".venv",
    "venv",
    # Build outputs
    "_build",
    "build",
    "dist",
    "htmlcov",
    "site",
    "wheels",
    # Build artifacts and packages
    "*.egg-info",
    "node_modules",
]

# Source file suffixes treated as modules
DEFAULT_FILE_EXTENSIONS = [".py"]

# Base classes marking a class as a behavioral contract
CONTRACT_BASES = {
    "Protocol",
    "typing.Protocol",
    "typing_extensions.Protocol",
    "ABC",
    "abc.ABC",
}

# Metaclasses marking a class as a behavioral contract
CONTRACT_METACLASSES = {"ABCMeta", "abc.ABCMeta"}

# Decorators marking a method as abstract
ABSTRACT_DECORATORS = {"abstractmethod", "abc.abstractmethod"}

# Presentation sort keys (node attribute names); "id" keeps id order
SORT_KEYS = ("d", "ca", "ce", "a", "i", "sca", "sce", "id")
DEFAULT_SORT_KEY = "d"

# Console columns: (header, node attribute, format spec)
DEFAULT_COLUMNS = [
    ("ID", "id", ""),
    ("Ca", "ca", ".0f"),
    ("Ce", "ce", ".0f"),
    ("A", "a", ".2f"),
    ("I", "i", ".2f"),
    ("D", "d", ".2f"),
]

STRUCTURAL_COLUMNS = DEFAULT_COLUMNS + [
    ("SCa", "sca", ".0f"),
    ("SCe", "sce", ".0f"),
]

# Distance at or above which a node is highlighted
DEFAULT_DISTANCE_WARNING = 0.7

# Default configuration file name, looked up in the analysed root
CONFIG_FILENAME = ".modgraph.yaml"
