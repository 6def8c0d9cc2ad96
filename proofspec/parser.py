"""
Proof Specification Parser

Turns a decoded, untyped document into a ProofSpecification:

1. Envelope: attributeCount, clauses, disclosed (stops at the first error)
2. Dispatch: each clause's `type` to its validator via the registry
3. Clause validation: every clause checked, issues accumulated
4. Index resolution: only when every clause validated
5. Assembly: all-or-nothing

The parser holds no state between calls.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .attributes import is_integer, is_sequence
from .clauses import Clause
from .config import ValidatorSettings, load_settings
from .errors import ErrorKind, SpecIssue, SpecValidationError, missing_field
from .logging_config import audit_log
from .registry import get_validator
from .resolver import AttributeIndexResolver
from .specification import DisclosedAttribute, ProofSpecification

logger = logging.getLogger(__name__)


class _EnvelopeError(Exception):
    """Internal short-circuit for envelope failures."""

    def __init__(self, issue: SpecIssue):
        self.issue = issue
        super().__init__(str(issue))


@dataclass
class ValidationResult:
    """Outcome of validating one document."""
    specification: Optional[ProofSpecification] = None
    issues: Tuple[SpecIssue, ...] = field(default_factory=tuple)

    def valid(self) -> bool:
        return self.specification is not None and not self.issues

    def raise_for_issues(self) -> ProofSpecification:
        """Return the specification or raise SpecValidationError."""
        if not self.valid():
            raise SpecValidationError(self.issues)
        return self.specification

    def to_dict(self) -> Dict[str, Any]:
        if self.valid():
            return {"valid": True, "spec_hash": self.specification.get_hash()}
        return {"valid": False, "issues": [i.to_dict() for i in self.issues]}


class SpecParser:
    """
    Validates proof specification documents.

    Usage:
        parser = SpecParser()
        result = parser.validate(document)
        if result.valid():
            spec = result.specification
    """

    def __init__(self, settings: Optional[ValidatorSettings] = None):
        self.settings = settings or load_settings()

    def validate(self, data: Any) -> ValidationResult:
        """Validate a document. Never raises for invalid input."""
        try:
            attribute_count, clause_entries, disclosed = self._parse_envelope(data)
        except _EnvelopeError as e:
            return self._reject([e.issue])

        clauses, issues = self._parse_clauses(clause_entries)
        if issues:
            return self._reject(issues)

        resolver = AttributeIndexResolver(attribute_count)
        issues = resolver.resolve(clauses, disclosed)
        if issues:
            return self._reject(issues)

        spec = ProofSpecification(
            attribute_count=attribute_count,
            disclosed=tuple(disclosed),
            clauses=tuple(clauses)
        )
        audit_log.spec_validated(spec.get_hash(), len(spec.clauses), attribute_count)
        return ValidationResult(specification=spec)

    def parse(self, data: Any) -> ProofSpecification:
        """Validate a document, raising SpecValidationError on any issue."""
        return self.validate(data).raise_for_issues()

    def _reject(self, issues: List[SpecIssue]) -> ValidationResult:
        audit_log.spec_rejected([i.kind.value for i in issues], [i.location() for i in issues])
        return ValidationResult(issues=tuple(issues))

    # --------------------------------------------------------
    # Envelope
    # --------------------------------------------------------

    def _parse_envelope(self, data: Any) -> Tuple[int, List[Any], List[DisclosedAttribute]]:
        if not isinstance(data, dict):
            raise _EnvelopeError(SpecIssue(
                ErrorKind.INVALID_DOCUMENT,
                f"specification must be an object, got {type(data).__name__}"
            ))

        for name in ("attributeCount", "clauses"):
            if name not in data:
                raise _EnvelopeError(missing_field(name))

        attribute_count = data["attributeCount"]
        if not is_integer(attribute_count) or attribute_count < 1:
            raise _EnvelopeError(SpecIssue(
                ErrorKind.INVALID_ATTRIBUTE_COUNT,
                "attributeCount must be an integer >= 1",
                field="attributeCount",
                value=attribute_count
            ))

        clause_entries = data["clauses"]
        if not is_sequence(clause_entries) or not clause_entries:
            raise _EnvelopeError(SpecIssue(
                ErrorKind.EMPTY_CLAUSE_LIST,
                "clauses must be a non-empty list",
                field="clauses"
            ))

        disclosed = self._parse_disclosed(data.get("disclosed", []))
        return attribute_count, list(clause_entries), disclosed

    def _parse_disclosed(self, raw: Any) -> List[DisclosedAttribute]:
        if raw is None:
            return []
        if not is_sequence(raw):
            raise _EnvelopeError(SpecIssue(
                ErrorKind.INVALID_DISCLOSED_ENTRY,
                "disclosed must be a list",
                field="disclosed"
            ))

        disclosed: List[DisclosedAttribute] = []
        values: Dict[int, str] = {}
        for position, entry in enumerate(raw):
            if not isinstance(entry, dict) or not is_integer(entry.get("index")) \
                    or not isinstance(entry.get("value"), str):
                raise _EnvelopeError(_bad_disclosure(
                    position, "each disclosed entry needs an integer 'index' and a string 'value'"
                ))
            index, value = entry["index"], entry["value"]
            if index in values and values[index] != value:
                raise _EnvelopeError(_bad_disclosure(
                    position, f"attribute {index} is disclosed with conflicting values"
                ))
            values[index] = value
            disclosed.append(DisclosedAttribute(index=index, value=value))
        return disclosed

    # --------------------------------------------------------
    # Clauses
    # --------------------------------------------------------

    def _parse_clauses(self, entries: List[Any]) -> Tuple[List[Clause], List[SpecIssue]]:
        clauses: List[Clause] = []
        issues: List[SpecIssue] = []

        for position, entry in enumerate(entries):
            if not isinstance(entry, dict) or not isinstance(entry.get("type"), str) \
                    or not isinstance(entry.get("clauseData"), dict):
                issues.append(SpecIssue(
                    ErrorKind.MALFORMED_CLAUSE,
                    "clause must be an object with a string 'type' and an object 'clauseData'",
                    clause_position=position
                ))
                continue

            try:
                validator = get_validator(entry["type"], position)
                clauses.append(validator.validate(entry["clauseData"], position, self.settings))
            except SpecValidationError as e:
                issues.extend(e.issues)
                continue
            logger.debug("clause %d (%s) validated", position, entry["type"])

        return clauses, issues


def _bad_disclosure(position: int, message: str) -> SpecIssue:
    return SpecIssue(
        ErrorKind.INVALID_DISCLOSED_ENTRY,
        message,
        field=f"disclosed[{position}]",
        details={"position": position}
    )


def validate_proof_spec(data: Any, settings: Optional[ValidatorSettings] = None) -> ValidationResult:
    """Validate a decoded document; see SpecParser.validate."""
    return SpecParser(settings).validate(data)


def parse_proof_spec(data: Any, settings: Optional[ValidatorSettings] = None) -> ProofSpecification:
    """Validate a decoded document; raises SpecValidationError."""
    return SpecParser(settings).parse(data)


def parse_proof_spec_json(text: str, settings: Optional[ValidatorSettings] = None) -> ProofSpecification:
    """Decode JSON text and validate it; raises SpecValidationError."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SpecValidationError([SpecIssue(
            ErrorKind.INVALID_DOCUMENT,
            f"specification is not valid JSON: {e}"
        )]) from e
    return parse_proof_spec(data, settings)
