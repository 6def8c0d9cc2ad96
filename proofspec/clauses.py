"""
Proof Specification Clauses

The closed set of clause kinds a composite proof is built from, their
typed payloads, and one validator per kind.

Design principles:
- Closed variant set (no runtime registration of new kinds)
- "Exactly one of" field groups become explicit payload sub-variants
- Validators are pure functions of a clause's own clauseData
- Every issue in a clause is reported, not only the first
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from .attributes import AttributeSet, is_integer, is_sequence, parse_attrs
from .config import ValidatorSettings, load_settings
from .errors import (
    ClauseValidationError,
    ErrorKind,
    SpecIssue,
    invalid_field,
    missing_field,
)


class ClauseKind(str, Enum):
    """Clause type tags as they appear on the wire."""
    COMMITMENT = "commitment"
    CREDENTIAL = "credential"
    INTERVAL = "interval"
    SET = "set"
    VERIFIABLE_ENCRYPTION = "verifiable_encryption"
    NYM = "nym"
    SCOPE_NYM = "scope_nym"


class Curve(str, Enum):
    """Curves a commitment may be defined over."""
    X25519 = "x25519"
    P256R1 = "p256r1"
    P384 = "p384"
    P512 = "p512"
    P256K1 = "p256k1"
    BLS381 = "bls381"
    BN254 = "bn254"


CURVES = tuple(c.value for c in Curve)

# Misspelling of crypto_val found in some scope_nym documents
SCOPE_NYM_ALIAS = "crypto_cal"


# ============================================================
# Payload sub-variants
# ============================================================

@dataclass(frozen=True)
class GeneratorBasis:
    """Commitment over explicit generators in a modular group."""
    generators: Tuple[str, ...]
    modulus: str

    def __post_init__(self):
        object.__setattr__(self, "generators", tuple(self.generators))

    def to_dict(self) -> Dict[str, Any]:
        return {"generators": list(self.generators), "modulus": self.modulus}


@dataclass(frozen=True)
class CurveBasis:
    """Commitment over a named elliptic curve."""
    curve: Curve

    def to_dict(self) -> Dict[str, Any]:
        return {"curve": self.curve.value}


@dataclass(frozen=True)
class RangeBound:
    """Interval proven against an issuer key with explicit bounds."""
    pk: str
    min_value: int
    max_value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"pk": self.pk, "min": self.min_value, "max": self.max_value}


@dataclass(frozen=True)
class SignatureBound:
    """Interval proven with pre-signed range values."""
    sigs: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "sigs", tuple(self.sigs))

    def to_dict(self) -> Dict[str, Any]:
        return {"sigs": list(self.sigs)}


@dataclass(frozen=True)
class ValueMembership:
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class CircuitMembership:
    circuit: str

    def to_dict(self) -> Dict[str, Any]:
        return {"circuit": self.circuit}


CommitmentBasis = Union[GeneratorBasis, CurveBasis]
IntervalBound = Union[RangeBound, SignatureBound]
SetMembership = Union[ValueMembership, CircuitMembership]


# ============================================================
# Clauses
# ============================================================

@dataclass(frozen=True)
class Clause:
    """Base for all clause kinds. `attrs` is always present."""
    attrs: AttributeSet

    kind: ClassVar[ClauseKind]

    def clause_data(self) -> Dict[str, Any]:
        return {"attrs": self.attrs.to_list()}

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "clauseData": self.clause_data()}


@dataclass(frozen=True)
class CommitmentClause(Clause):
    basis: CommitmentBasis
    kind: ClassVar[ClauseKind] = ClauseKind.COMMITMENT

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d.update(self.basis.to_dict())
        return d


@dataclass(frozen=True)
class CredentialClause(Clause):
    pk: str
    kind: ClassVar[ClauseKind] = ClauseKind.CREDENTIAL

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d["pk"] = self.pk
        return d


@dataclass(frozen=True)
class IntervalClause(Clause):
    bound: IntervalBound
    kind: ClassVar[ClauseKind] = ClauseKind.INTERVAL

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d.update(self.bound.to_dict())
        return d


@dataclass(frozen=True)
class SetClause(Clause):
    pk: str
    membership: SetMembership
    kind: ClassVar[ClauseKind] = ClauseKind.SET

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d["pk"] = self.pk
        d.update(self.membership.to_dict())
        return d


@dataclass(frozen=True)
class VerifiableEncryptionClause(Clause):
    pk: str
    crypto_val: str
    label: str
    kind: ClassVar[ClauseKind] = ClauseKind.VERIFIABLE_ENCRYPTION

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d.update({"pk": self.pk, "crypto_val": self.crypto_val, "label": self.label})
        return d


@dataclass(frozen=True)
class NymClause(Clause):
    crypto_val: str
    kind: ClassVar[ClauseKind] = ClauseKind.NYM

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d["crypto_val"] = self.crypto_val
        return d


@dataclass(frozen=True)
class ScopeNymClause(Clause):
    crypto_val: str
    scope: str
    kind: ClassVar[ClauseKind] = ClauseKind.SCOPE_NYM

    def clause_data(self) -> Dict[str, Any]:
        d = super().clause_data()
        d.update({"crypto_val": self.crypto_val, "scope": self.scope})
        return d


# ============================================================
# Field checks
# ============================================================

class FieldCheck:
    """Reads typed fields out of a clauseData mapping, collecting issues."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.issues: List[SpecIssue] = []

    def has(self, name: str) -> bool:
        return name in self.data

    def add(self, issue: SpecIssue) -> None:
        self.issues.append(issue)

    def attrs(self) -> Optional[AttributeSet]:
        attrs, issues = parse_attrs(self.data.get("attrs"), present=self.has("attrs"))
        self.issues.extend(issues)
        return attrs

    def string(self, name: str) -> Optional[str]:
        """A required, non-empty opaque string."""
        if not self.has(name):
            self.add(missing_field(name))
            return None
        value = self.data[name]
        if not isinstance(value, str) or not value:
            self.add(invalid_field(name, "a non-empty string", value))
            return None
        return value

    def integer(self, name: str) -> Optional[int]:
        if not self.has(name):
            self.add(missing_field(name))
            return None
        value = self.data[name]
        if not is_integer(value):
            self.add(invalid_field(name, "an integer", value))
            return None
        return value

    def strings(self, name: str) -> Optional[Tuple[str, ...]]:
        """A required, non-empty list of non-empty strings."""
        if not self.has(name):
            self.add(missing_field(name))
            return None
        value = self.data[name]
        if not is_sequence(value) or not value:
            self.add(invalid_field(name, "a non-empty list of strings", value))
            return None
        if not all(isinstance(v, str) and v for v in value):
            self.add(invalid_field(name, "a non-empty list of strings", value))
            return None
        return tuple(value)

    def exclusive(self, first: Sequence[str], second: Sequence[str]) -> Optional[int]:
        """
        Decide which of two mutually exclusive field groups was chosen.

        A group counts as chosen when any of its fields is present.
        Returns 0 or 1, or None after recording the conflict/absence.
        """
        in_first = [f for f in first if self.has(f)]
        in_second = [f for f in second if self.has(f)]
        groups = [list(first), list(second)]
        if in_first and in_second:
            self.add(SpecIssue(
                ErrorKind.CONFLICTING_FIELD_GROUPS,
                f"fields {in_first + in_second} mix exclusive groups "
                f"{_fmt_group(first)} and {_fmt_group(second)}",
                value=in_first + in_second,
                details={"groups": groups}
            ))
            return None
        if not in_first and not in_second:
            self.add(SpecIssue(
                ErrorKind.MISSING_FIELD_GROUP,
                f"exactly one of {_fmt_group(first)} or {_fmt_group(second)} is required",
                details={"groups": groups}
            ))
            return None
        return 0 if in_first else 1


def _fmt_group(fields: Sequence[str]) -> str:
    return "{" + ", ".join(fields) + "}"


# ============================================================
# Validators
# ============================================================

class ClauseValidator(ABC):
    """Abstract base class for clause validators."""

    kind: ClassVar[ClauseKind]
    properties: ClassVar[FrozenSet[str]]

    def validate(
        self,
        clause_data: Dict[str, Any],
        position: Optional[int] = None,
        settings: Optional[ValidatorSettings] = None
    ) -> Clause:
        """
        Validate a clauseData mapping and return the typed clause.

        Raises:
            ClauseValidationError: with every issue found in this clause
        """
        settings = settings or load_settings()
        if not isinstance(clause_data, dict):
            raise ClauseValidationError([SpecIssue(
                ErrorKind.MALFORMED_CLAUSE,
                "clauseData must be an object",
                clause_position=position,
                clause_type=self.kind.value
            )])

        check = FieldCheck(clause_data)
        if settings.reject_unknown_fields:
            for name in sorted(set(clause_data) - self.known_fields(settings)):
                check.add(SpecIssue(
                    ErrorKind.UNEXPECTED_FIELD,
                    f"field '{name}' is not defined for {self.kind.value} clauses",
                    field=name
                ))

        attrs = check.attrs()
        clause = self.build(check, attrs, settings)

        if check.issues:
            raise ClauseValidationError([
                replace(issue, clause_position=position, clause_type=self.kind.value)
                for issue in check.issues
            ])
        return clause

    def known_fields(self, settings: ValidatorSettings) -> FrozenSet[str]:
        return self.properties

    @abstractmethod
    def build(self, check: FieldCheck, attrs: Optional[AttributeSet], settings: ValidatorSettings) -> Optional[Clause]:
        """Read the variant payload; return None if any issue was recorded."""


class CommitmentValidator(ClauseValidator):
    """
    commitment

    Opens a commitment to the attributes, either over explicit generators
    and a modulus or over a named curve.
    """
    kind = ClauseKind.COMMITMENT
    properties = frozenset({"attrs", "generators", "modulus", "curve"})

    def build(self, check, attrs, settings):
        choice = check.exclusive(("generators", "modulus"), ("curve",))
        basis = None
        if choice == 0:
            generators = check.strings("generators")
            modulus = check.string("modulus")
            if generators is not None and modulus is not None:
                basis = GeneratorBasis(generators, modulus)
        elif choice == 1:
            curve = check.string("curve")
            if curve is not None:
                if curve in CURVES:
                    basis = CurveBasis(Curve(curve))
                else:
                    check.add(SpecIssue(
                        ErrorKind.UNKNOWN_CURVE,
                        f"curve '{curve}' is not one of {list(CURVES)}",
                        field="curve",
                        value=curve
                    ))

        if attrs is None or basis is None:
            return None
        return CommitmentClause(attrs=attrs, basis=basis)


class CredentialValidator(ClauseValidator):
    """
    credential

    Proves knowledge of a credential signed under `pk`.
    """
    kind = ClauseKind.CREDENTIAL
    properties = frozenset({"attrs", "pk"})

    def build(self, check, attrs, settings):
        pk = check.string("pk")
        if attrs is None or pk is None:
            return None
        return CredentialClause(attrs=attrs, pk=pk)


class IntervalValidator(ClauseValidator):
    """
    interval

    Proves the attributes lie in a range, given either as explicit
    {pk, min, max} bounds or as pre-signed values {sigs}.
    """
    kind = ClauseKind.INTERVAL
    properties = frozenset({"attrs", "pk", "min", "max", "sigs"})

    def build(self, check, attrs, settings):
        choice = check.exclusive(("pk", "min", "max"), ("sigs",))
        bound = None
        if choice == 0:
            pk = check.string("pk")
            lo = check.integer("min")
            hi = check.integer("max")
            if lo is not None and hi is not None and lo > hi and settings.strict_ranges:
                check.add(SpecIssue(
                    ErrorKind.INVERTED_RANGE,
                    f"min ({lo}) is greater than max ({hi})",
                    field="min",
                    value=lo,
                    details={"min": lo, "max": hi}
                ))
            elif pk is not None and lo is not None and hi is not None:
                bound = RangeBound(pk, lo, hi)
        elif choice == 1:
            sigs = check.strings("sigs")
            if sigs is not None:
                bound = SignatureBound(sigs)

        if attrs is None or bound is None:
            return None
        return IntervalClause(attrs=attrs, bound=bound)


class SetValidator(ClauseValidator):
    """
    set

    Proves set membership, either of a literal value or via a circuit.
    """
    kind = ClauseKind.SET
    properties = frozenset({"attrs", "pk", "value", "circuit"})

    def build(self, check, attrs, settings):
        pk = check.string("pk")
        choice = check.exclusive(("value",), ("circuit",))
        membership = None
        if choice == 0:
            value = check.integer("value")
            if value is not None:
                membership = ValueMembership(value)
        elif choice == 1:
            circuit = check.string("circuit")
            if circuit is not None:
                membership = CircuitMembership(circuit)

        if attrs is None or pk is None or membership is None:
            return None
        return SetClause(attrs=attrs, pk=pk, membership=membership)


class VerifiableEncryptionValidator(ClauseValidator):
    """
    verifiable_encryption

    Proves a ciphertext encrypts the attributes under `pk`; `label` names
    the decryption policy.
    """
    kind = ClauseKind.VERIFIABLE_ENCRYPTION
    properties = frozenset({"attrs", "pk", "crypto_val", "label"})

    def build(self, check, attrs, settings):
        pk = check.string("pk")
        crypto_val = check.string("crypto_val")
        label = check.string("label")
        if None in (attrs, pk, crypto_val, label):
            return None
        return VerifiableEncryptionClause(attrs=attrs, pk=pk, crypto_val=crypto_val, label=label)


class NymValidator(ClauseValidator):
    """nym"""
    kind = ClauseKind.NYM
    properties = frozenset({"attrs", "crypto_val"})

    def build(self, check, attrs, settings):
        crypto_val = check.string("crypto_val")
        if attrs is None or crypto_val is None:
            return None
        return NymClause(attrs=attrs, crypto_val=crypto_val)


class ScopeNymValidator(ClauseValidator):
    """
    scope_nym

    A pseudonym bound to `scope`. `crypto_val` is the canonical field
    name; `crypto_cal` is rejected or folded into it depending on
    settings.scope_nym_alias.
    """
    kind = ClauseKind.SCOPE_NYM
    properties = frozenset({"attrs", "crypto_val", "scope"})

    def known_fields(self, settings):
        return self.properties | {SCOPE_NYM_ALIAS}

    def build(self, check, attrs, settings):
        crypto_val = self._crypto_val(check, settings)
        scope = check.string("scope")
        if None in (attrs, crypto_val, scope):
            return None
        return ScopeNymClause(attrs=attrs, crypto_val=crypto_val, scope=scope)

    def _crypto_val(self, check: FieldCheck, settings: ValidatorSettings) -> Optional[str]:
        if not check.has(SCOPE_NYM_ALIAS):
            return check.string("crypto_val")

        if settings.scope_nym_alias == "reject":
            check.add(SpecIssue(
                ErrorKind.REJECTED_FIELD_ALIAS,
                f"'{SCOPE_NYM_ALIAS}' is not accepted, use 'crypto_val'",
                field=SCOPE_NYM_ALIAS,
                value=check.data[SCOPE_NYM_ALIAS]
            ))
            return check.string("crypto_val") if check.has("crypto_val") else None

        alias = check.string(SCOPE_NYM_ALIAS)
        if not check.has("crypto_val"):
            return alias
        canonical = check.string("crypto_val")
        if alias is not None and canonical is not None and alias != canonical:
            check.add(SpecIssue(
                ErrorKind.CONFLICTING_FIELD_GROUPS,
                f"'crypto_val' and '{SCOPE_NYM_ALIAS}' disagree",
                value=["crypto_val", SCOPE_NYM_ALIAS],
                details={"groups": [["crypto_val"], [SCOPE_NYM_ALIAS]]}
            ))
            return None
        return canonical
