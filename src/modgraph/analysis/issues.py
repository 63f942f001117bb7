"""Non-fatal per-module issues collected during analysis."""

from dataclasses import dataclass
from enum import Enum


class IssueKind(str, Enum):
    """Category of a non-fatal analysis issue."""

    INPUT_INCOMPLETE = "input_incomplete"
    ORACLE_UNAVAILABLE = "oracle_unavailable"
    MALFORMED_DECLARATION = "malformed_declaration"


@dataclass(frozen=True)
class AnalysisIssue:
    """A relationship that was not counted, and why."""

    kind: IssueKind
    module_id: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "module_id": self.module_id,
            "message": self.message,
        }
