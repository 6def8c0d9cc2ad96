#!/usr/bin/env python3
"""
proofspec Example - Validating a Composite Proof Request

Validates an age-and-residency proof request, prints the accepted model
and its digest, then shows how a defective request is reported.

Run with: python examples/composite_proof_example.py
"""

import json

from proofspec import (
    IntervalClause,
    configure_logging,
    validate_proof_spec,
)


AGE_AND_RESIDENCY = {
    "attributeCount": 4,
    "disclosed": [{"index": 3, "value": "ES"}],
    "clauses": [
        {"type": "credential", "clauseData": {"attrs": [0, 1, 2, 3], "pk": "issuer-pk-b64"}},
        {"type": "interval", "clauseData": {"attrs": [1], "pk": "range-pk-b64", "min": 18, "max": 150}},
        {"type": "scope_nym", "clauseData": {"attrs": [0], "crypto_val": "nym-b64", "scope": "shop.example"}},
    ]
}

DEFECTIVE = {
    "attributeCount": 2,
    "clauses": [
        {"type": "commitment", "clauseData": {"attrs": [0], "curve": "bls381", "generators": ["g1"]}},
        {"type": "interval", "clauseData": {"attrs": [1, 1], "pk": "k", "min": 10, "max": 5}},
        {"type": "ring_signature", "clauseData": {"attrs": [0]}},
    ]
}


def main():
    configure_logging(level="WARNING", json_format=False)

    print("=" * 60)
    print("Accepted request")
    print("=" * 60)
    result = validate_proof_spec(AGE_AND_RESIDENCY)
    spec = result.raise_for_issues()
    print(f"digest:  {spec.get_hash()}")
    print(f"clauses: {[k.value for k in spec.kinds()]}")
    for clause in spec.clauses_of(IntervalClause):
        print(f"range:   attrs {clause.attrs.to_list()} in "
              f"[{clause.bound.min_value}, {clause.bound.max_value}]")

    print()
    print("=" * 60)
    print("Rejected request")
    print("=" * 60)
    result = validate_proof_spec(DEFECTIVE)
    for issue in result.issues:
        print(f"{issue.kind.value:<26} {issue.location():<32} {issue.message}")

    print()
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
