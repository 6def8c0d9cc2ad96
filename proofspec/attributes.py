"""
Attribute index sets.

An AttributeSet is the non-empty, duplicate-free collection of attribute
indices a clause operates over. Input order is preserved so the model
serializes back to the same `attrs` list it was parsed from.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .errors import ErrorKind, SpecIssue, SpecValidationError, invalid_field, missing_field


def is_integer(value: Any) -> bool:
    """True for ints that are not booleans."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class AttributeSet:
    indices: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "indices", tuple(self.indices))
        if not self.indices:
            raise SpecValidationError([
                SpecIssue(ErrorKind.EMPTY_ATTRIBUTE_SET, "attribute set must not be empty", field="attrs")
            ])
        seen = set()
        for index in self.indices:
            if index in seen:
                raise SpecValidationError([_duplicate(index)])
            seen.add(index)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, index: object) -> bool:
        return index in self.indices

    def max_index(self) -> int:
        return max(self.indices)

    def to_list(self) -> List[int]:
        return list(self.indices)


def _duplicate(index: int) -> SpecIssue:
    return SpecIssue(
        ErrorKind.DUPLICATE_ATTRIBUTE_INDEX,
        f"attribute index {index} appears more than once",
        field="attrs",
        value=index
    )


def parse_attrs(raw: Any, present: bool = True) -> Tuple[Optional[AttributeSet], List[SpecIssue]]:
    """
    Validate a raw `attrs` value.

    Returns the AttributeSet (or None) together with every issue found,
    so callers can merge them with the rest of a clause's issues.
    """
    if not present:
        return None, [missing_field("attrs")]
    if not is_sequence(raw):
        return None, [invalid_field("attrs", "a list of integers", raw)]
    if not raw:
        return None, [SpecIssue(ErrorKind.EMPTY_ATTRIBUTE_SET, "attribute set must not be empty", field="attrs")]

    issues: List[SpecIssue] = []
    seen = set()
    reported = set()
    for item in raw:
        if not is_integer(item):
            issues.append(invalid_field("attrs", "a list of integers", item))
            continue
        if item in seen and item not in reported:
            issues.append(_duplicate(item))
            reported.add(item)
        seen.add(item)

    if issues:
        return None, issues
    return AttributeSet(tuple(raw)), []


def attribute_set(indices: Sequence[int]) -> AttributeSet:
    """Build an AttributeSet from trusted code, raising on violations."""
    attrs, issues = parse_attrs(list(indices))
    if issues:
        raise SpecValidationError(issues)
    return attrs
