"""
Proof Specification model.

The immutable, validated description of a composite proof handed to
proof-construction backends. Instances are produced by the parser; direct
construction re-checks the envelope and attribute index invariants.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Tuple, Type, TypeVar

from .canonicalization import canonicalize_str
from .clauses import Clause, ClauseKind
from .errors import ErrorKind, SpecIssue, SpecValidationError
from .hashing import clause_hash, spec_hash
from .resolver import AttributeIndexResolver

C = TypeVar("C", bound=Clause)


@dataclass(frozen=True)
class DisclosedAttribute:
    """An attribute whose value is revealed alongside the proof."""
    index: int
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "value": self.value}


@dataclass(frozen=True)
class ProofSpecification:
    """
    A validated composite proof specification.

    - attribute_count: size of the shared attribute vector
    - disclosed: attributes revealed in the clear (may be empty)
    - clauses: clauses in input order; order is significant downstream
    """
    attribute_count: int
    disclosed: Tuple[DisclosedAttribute, ...]
    clauses: Tuple[Clause, ...]

    def __post_init__(self):
        object.__setattr__(self, "disclosed", tuple(self.disclosed))
        object.__setattr__(self, "clauses", tuple(self.clauses))
        if isinstance(self.attribute_count, bool) or not isinstance(self.attribute_count, int) \
                or self.attribute_count < 1:
            raise SpecValidationError([SpecIssue(
                ErrorKind.INVALID_ATTRIBUTE_COUNT,
                "attributeCount must be an integer >= 1",
                field="attributeCount",
                value=self.attribute_count
            )])
        if not self.clauses:
            raise SpecValidationError([SpecIssue(
                ErrorKind.EMPTY_CLAUSE_LIST,
                "a specification needs at least one clause",
                field="clauses"
            )])
        issues = AttributeIndexResolver(self.attribute_count).resolve(self.clauses, self.disclosed)
        if issues:
            raise SpecValidationError(issues)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form; parsing it again yields an equal specification."""
        return {
            "attributeCount": self.attribute_count,
            "disclosed": [d.to_dict() for d in self.disclosed],
            "clauses": [c.to_dict() for c in self.clauses],
        }

    def to_json(self) -> str:
        return canonicalize_str(self.to_dict())

    def get_hash(self) -> str:
        return spec_hash(self.to_dict())

    def clause_hashes(self) -> List[str]:
        return [clause_hash(c.to_dict()) for c in self.clauses]

    def clauses_of(self, clause_type: Type[C]) -> List[C]:
        return [c for c in self.clauses if isinstance(c, clause_type)]

    def kinds(self) -> List[ClauseKind]:
        return [c.kind for c in self.clauses]

    def referenced_indices(self) -> FrozenSet[int]:
        """Every attribute index used by any clause."""
        return frozenset(i for c in self.clauses for i in c.attrs)

    def disclosed_indices(self) -> FrozenSet[int]:
        return frozenset(d.index for d in self.disclosed)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], settings=None) -> 'ProofSpecification':
        """Validate a decoded document; raises SpecValidationError."""
        from .parser import parse_proof_spec
        return parse_proof_spec(data, settings=settings)
