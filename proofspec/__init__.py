"""
proofspec - Proof Specification Validator

Version: 1.0.0
License: Apache 2.0

Parses the decoded JSON description of a composite zero-knowledge proof
and produces an immutable, semantically validated ProofSpecification.

A specification declares a shared vector of `attributeCount` secret
attributes, optionally discloses some of them, and lists clauses over
attribute indices. Seven clause kinds exist:

    commitment, credential, interval, set,
    verifiable_encryption, nym, scope_nym

Validation is all-or-nothing. Envelope errors stop at the first failure;
clause errors are collected across every clause so a specification
author sees all defects at once.

Usage:
    from proofspec import parse_proof_spec, validate_proof_spec

    spec = parse_proof_spec({
        "attributeCount": 3,
        "clauses": [
            {"type": "credential", "clauseData": {"attrs": [0, 1], "pk": "abc"}}
        ]
    })
    spec.get_hash()  # "sha256:..."

    result = validate_proof_spec(document)
    if not result.valid():
        for issue in result.issues:
            print(issue.kind.value, issue.location(), issue.message)
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

import logging

# Errors
from .errors import (
    ErrorKind,
    SpecIssue,
    SpecValidationError,
    ClauseValidationError,
)

# Attributes
from .attributes import AttributeSet, attribute_set

# Clauses
from .clauses import (
    ClauseKind,
    Curve,
    CURVES,
    Clause,
    CommitmentClause,
    CredentialClause,
    IntervalClause,
    SetClause,
    VerifiableEncryptionClause,
    NymClause,
    ScopeNymClause,
    GeneratorBasis,
    CurveBasis,
    RangeBound,
    SignatureBound,
    ValueMembership,
    CircuitMembership,
    ClauseValidator,
)

# Registry
from .registry import CLAUSE_VALIDATORS, clause_types, get_validator

# Model
from .specification import ProofSpecification, DisclosedAttribute

# Resolution
from .resolver import AttributeIndexResolver

# Parser
from .parser import (
    SpecParser,
    ValidationResult,
    validate_proof_spec,
    parse_proof_spec,
    parse_proof_spec_json,
)

# Digests
from .canonicalization import canonicalize, canonicalize_str
from .hashing import sha256_hash, spec_hash, clause_hash, verify_hash

# Configuration
from .config import ValidatorSettings, load_settings, reload_settings

# Logging
from .logging_config import configure_logging, audit_log

# Silent unless the host application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "__version__",

    # Errors
    "ErrorKind",
    "SpecIssue",
    "SpecValidationError",
    "ClauseValidationError",

    # Attributes
    "AttributeSet",
    "attribute_set",

    # Clauses
    "ClauseKind",
    "Curve",
    "CURVES",
    "Clause",
    "CommitmentClause",
    "CredentialClause",
    "IntervalClause",
    "SetClause",
    "VerifiableEncryptionClause",
    "NymClause",
    "ScopeNymClause",
    "GeneratorBasis",
    "CurveBasis",
    "RangeBound",
    "SignatureBound",
    "ValueMembership",
    "CircuitMembership",
    "ClauseValidator",

    # Registry
    "CLAUSE_VALIDATORS",
    "clause_types",
    "get_validator",

    # Model
    "ProofSpecification",
    "DisclosedAttribute",
    "AttributeIndexResolver",

    # Parser
    "SpecParser",
    "ValidationResult",
    "validate_proof_spec",
    "parse_proof_spec",
    "parse_proof_spec_json",

    # Digests
    "canonicalize",
    "canonicalize_str",
    "sha256_hash",
    "spec_hash",
    "clause_hash",
    "verify_hash",

    # Configuration
    "ValidatorSettings",
    "load_settings",
    "reload_settings",

    # Logging
    "configure_logging",
    "audit_log",
]
