"""Result types returned by document validation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

IssueKind = Literal[
    "type_mismatch",
    "enum_violation",
    "unknown_locale",
    "cardinality",
    "uniqueness",
    "nesting",
    "immutable_field",
]


class ValidationIssue(BaseModel):
    """A single violation located by its dotted field path."""

    path: str
    kind: IssueKind
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating a candidate product document."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]
