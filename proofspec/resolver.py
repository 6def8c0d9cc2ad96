"""
Attribute index resolution.

Cross-checks every attribute index referenced by clauses and disclosed
entries against the declared attribute count. Kept apart from the clause
validators so they stay functions of their own payload.
"""

import logging
from typing import Any, List, Sequence

from .clauses import Clause
from .errors import ErrorKind, SpecIssue, SpecValidationError

logger = logging.getLogger(__name__)


def out_of_range(index: int, attribute_count: int, **kwargs) -> SpecIssue:
    return SpecIssue(
        ErrorKind.ATTRIBUTE_INDEX_OUT_OF_RANGE,
        f"attribute index {index} is outside [0, {attribute_count})",
        value=index,
        details={"attribute_count": attribute_count},
        **kwargs
    )


class AttributeIndexResolver:
    """Checks indices fall in [0, attribute_count)."""

    def __init__(self, attribute_count: int):
        self.attribute_count = attribute_count

    def in_range(self, index: int) -> bool:
        return 0 <= index < self.attribute_count

    def resolve(self, clauses: Sequence[Clause], disclosed: Sequence[Any] = ()) -> List[SpecIssue]:
        """Return one issue per out-of-range reference, in document order."""
        issues: List[SpecIssue] = []

        for position, entry in enumerate(disclosed):
            if not self.in_range(entry.index):
                issues.append(out_of_range(
                    entry.index,
                    self.attribute_count,
                    field=f"disclosed[{position}].index"
                ))

        for position, clause in enumerate(clauses):
            for index in clause.attrs:
                if not self.in_range(index):
                    issues.append(out_of_range(
                        index,
                        self.attribute_count,
                        field="attrs",
                        clause_position=position,
                        clause_type=clause.kind.value
                    ))

        if issues:
            logger.debug("%d attribute index reference(s) out of range", len(issues))
        return issues

    def check(self, clauses: Sequence[Clause], disclosed: Sequence[Any] = ()) -> None:
        """Raise SpecValidationError if any reference is out of range."""
        issues = self.resolve(clauses, disclosed)
        if issues:
            raise SpecValidationError(issues)
