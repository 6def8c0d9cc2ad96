"""
Clause type registry.

Maps wire type tags to their validators. The mapping is built once at
import and exposed read-only; there is no registration path.
"""

from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from .clauses import (
    ClauseValidator,
    CommitmentValidator,
    CredentialValidator,
    IntervalValidator,
    NymValidator,
    ScopeNymValidator,
    SetValidator,
    VerifiableEncryptionValidator,
)
from .errors import ErrorKind, SpecIssue, SpecValidationError


CLAUSE_VALIDATORS: Mapping[str, ClauseValidator] = MappingProxyType({
    v.kind.value: v
    for v in (
        CommitmentValidator(),
        CredentialValidator(),
        IntervalValidator(),
        SetValidator(),
        VerifiableEncryptionValidator(),
        NymValidator(),
        ScopeNymValidator(),
    )
})


def clause_types() -> List[str]:
    """List recognized clause type tags."""
    return list(CLAUSE_VALIDATORS.keys())


def unknown_clause_type(tag: Any, position: Optional[int] = None) -> SpecIssue:
    return SpecIssue(
        ErrorKind.UNKNOWN_CLAUSE_TYPE,
        f"unknown clause type {tag!r}, expected one of {clause_types()}",
        field="type",
        clause_position=position,
        value=tag
    )


def get_validator(tag: str, position: Optional[int] = None) -> ClauseValidator:
    """
    Look up the validator for a clause type tag.

    Raises:
        SpecValidationError: UnknownClauseType if the tag is not recognized
    """
    validator = CLAUSE_VALIDATORS.get(tag) if isinstance(tag, str) else None
    if validator is None:
        raise SpecValidationError([unknown_clause_type(tag, position)])
    return validator
