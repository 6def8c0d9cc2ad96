"""
Proof Specification Error Taxonomy

Every rejection is reported as a SpecIssue carrying enough context
(field, clause position, offending value) to render a precise diagnostic.
Issues are values; SpecValidationError is only the carrier used when a
caller asks for an exception instead of a result.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class ErrorKind(str, Enum):
    """Validation failure kinds."""
    # Envelope
    INVALID_DOCUMENT = "InvalidDocument"
    MISSING_FIELD = "MissingField"
    INVALID_ATTRIBUTE_COUNT = "InvalidAttributeCount"
    EMPTY_CLAUSE_LIST = "EmptyClauseList"
    INVALID_DISCLOSED_ENTRY = "InvalidDisclosedEntry"

    # Dispatch
    UNKNOWN_CLAUSE_TYPE = "UnknownClauseType"
    MALFORMED_CLAUSE = "MalformedClause"

    # Clause shape
    MISSING_FIELD_GROUP = "MissingFieldGroup"
    CONFLICTING_FIELD_GROUPS = "ConflictingFieldGroups"
    UNKNOWN_CURVE = "UnknownCurve"
    INVERTED_RANGE = "InvertedRange"
    EMPTY_ATTRIBUTE_SET = "EmptyAttributeSet"
    DUPLICATE_ATTRIBUTE_INDEX = "DuplicateAttributeIndex"
    INVALID_FIELD = "InvalidField"
    UNEXPECTED_FIELD = "UnexpectedField"
    REJECTED_FIELD_ALIAS = "RejectedFieldAlias"

    # Cross-reference
    ATTRIBUTE_INDEX_OUT_OF_RANGE = "AttributeIndexOutOfRange"


_CLAUSE_ENVELOPE_FIELDS = ("type", "clauseData")


@dataclass(frozen=True)
class SpecIssue:
    """A single violated rule."""
    kind: ErrorKind
    message: str
    field: Optional[str] = None
    clause_position: Optional[int] = None
    clause_type: Optional[str] = None
    value: Any = dataclasses.field(default=None, compare=False)
    details: Dict[str, Any] = dataclasses.field(default_factory=dict, compare=False)

    def location(self) -> str:
        parts = []
        if self.clause_position is not None:
            parts.append(f"clauses[{self.clause_position}]")
            if self.field in _CLAUSE_ENVELOPE_FIELDS:
                parts.append(self.field)
            elif self.field:
                parts.append(f"clauseData.{self.field}")
        elif self.field:
            parts.append(self.field)
        return ".".join(parts) or "$"

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "kind": self.kind.value,
            "message": self.message,
            "location": self.location(),
        }
        if self.field:
            d["field"] = self.field
        if self.clause_position is not None:
            d["clause_position"] = self.clause_position
        if self.clause_type:
            d["clause_type"] = self.clause_type
        if self.value is not None:
            d["value"] = self.value
        if self.details:
            d.update(self.details)
        return d

    def __str__(self) -> str:
        return f"{self.kind.value} at {self.location()}: {self.message}"


class SpecValidationError(Exception):
    """Raised when a proof specification fails validation."""

    def __init__(self, issues: Iterable[SpecIssue]):
        self.issues: Tuple[SpecIssue, ...] = tuple(issues)
        if not self.issues:
            raise ValueError("SpecValidationError requires at least one issue")
        summary = "; ".join(str(i) for i in self.issues[:3])
        if len(self.issues) > 3:
            summary += f" (+{len(self.issues) - 3} more)"
        super().__init__(summary)

    @property
    def kinds(self) -> Tuple[ErrorKind, ...]:
        return tuple(i.kind for i in self.issues)

    def has(self, kind: ErrorKind) -> bool:
        return kind in self.kinds

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": False, "issues": [i.to_dict() for i in self.issues]}


class ClauseValidationError(SpecValidationError):
    """Raised by a clause validator; all issues belong to one clause."""


def missing_field(name: str, **kwargs) -> SpecIssue:
    return SpecIssue(ErrorKind.MISSING_FIELD, f"required field '{name}' is missing", field=name, **kwargs)


def invalid_field(name: str, expected: str, value: Any = None, **kwargs) -> SpecIssue:
    return SpecIssue(
        ErrorKind.INVALID_FIELD,
        f"field '{name}' must be {expected}",
        field=name,
        value=value,
        **kwargs
    )
