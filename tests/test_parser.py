"""
Specification parser tests.

Envelope checks short-circuit; clause and dispatch issues accumulate
across the whole clause list; index resolution runs last.
"""

import json
import unittest

from proofspec import (
    ErrorKind,
    SpecParser,
    SpecValidationError,
    ValidatorSettings,
    parse_proof_spec,
    parse_proof_spec_json,
    validate_proof_spec,
)
from proofspec.specification import DisclosedAttribute

SETTINGS = ValidatorSettings()


def nym(*attrs):
    return {"type": "nym", "clauseData": {"attrs": list(attrs), "crypto_val": "v"}}


def spec(**overrides):
    doc = {"attributeCount": 4, "clauses": [nym(0)]}
    doc.update(overrides)
    return doc


class TestEnvelope(unittest.TestCase):

    def kinds(self, doc):
        result = validate_proof_spec(doc, SETTINGS)
        self.assertFalse(result.valid())
        return [i.kind for i in result.issues]

    def test_document_not_object(self):
        self.assertEqual(self.kinds([1, 2]), [ErrorKind.INVALID_DOCUMENT])
        self.assertEqual(self.kinds(None), [ErrorKind.INVALID_DOCUMENT])

    def test_missing_attribute_count(self):
        result = validate_proof_spec({"clauses": [nym(0)]}, SETTINGS)
        self.assertEqual(result.issues[0].kind, ErrorKind.MISSING_FIELD)
        self.assertEqual(result.issues[0].field, "attributeCount")

    def test_missing_clauses(self):
        result = validate_proof_spec({"attributeCount": 2}, SETTINGS)
        self.assertEqual(result.issues[0].kind, ErrorKind.MISSING_FIELD)
        self.assertEqual(result.issues[0].field, "clauses")

    def test_invalid_attribute_count(self):
        for value in (0, -1, "3", 2.0, True, None):
            self.assertEqual(self.kinds(spec(attributeCount=value)), [ErrorKind.INVALID_ATTRIBUTE_COUNT])

    def test_empty_clause_list(self):
        self.assertEqual(self.kinds(spec(clauses=[])), [ErrorKind.EMPTY_CLAUSE_LIST])
        self.assertEqual(self.kinds(spec(clauses={"0": nym(0)})), [ErrorKind.EMPTY_CLAUSE_LIST])

    def test_envelope_short_circuits(self):
        # Bad count and bad clause: only the envelope error is reported
        self.assertEqual(
            self.kinds({"attributeCount": 0, "clauses": [{"type": "nope"}]}),
            [ErrorKind.INVALID_ATTRIBUTE_COUNT]
        )


class TestDisclosed(unittest.TestCase):

    def test_disclosed_parsed_in_order(self):
        parsed = parse_proof_spec(spec(disclosed=[{"index": 3, "value": "b"}, {"index": 1, "value": "a"}]), SETTINGS)
        self.assertEqual(parsed.disclosed, (DisclosedAttribute(3, "b"), DisclosedAttribute(1, "a")))

    def test_disclosed_optional(self):
        self.assertEqual(parse_proof_spec(spec(), SETTINGS).disclosed, ())
        self.assertEqual(parse_proof_spec(spec(disclosed=None), SETTINGS).disclosed, ())

    def test_malformed_entries(self):
        bad_entries = [
            "x",
            {"index": 0},
            {"value": "v"},
            {"index": "0", "value": "v"},
            {"index": 0, "value": 7},
            {"index": False, "value": "v"},
        ]
        for entry in bad_entries:
            result = validate_proof_spec(spec(disclosed=[{"index": 0, "value": "ok"}, entry]), SETTINGS)
            issue = result.issues[0]
            self.assertEqual(issue.kind, ErrorKind.INVALID_DISCLOSED_ENTRY)
            self.assertEqual(issue.details["position"], 1)
            self.assertEqual(issue.location(), "disclosed[1]")

    def test_disclosed_not_a_list(self):
        result = validate_proof_spec(spec(disclosed={"index": 0, "value": "v"}), SETTINGS)
        self.assertEqual(result.issues[0].kind, ErrorKind.INVALID_DISCLOSED_ENTRY)

    def test_identical_duplicate_tolerated(self):
        parsed = parse_proof_spec(spec(disclosed=[{"index": 0, "value": "v"}, {"index": 0, "value": "v"}]), SETTINGS)
        self.assertEqual(len(parsed.disclosed), 2)

    def test_conflicting_duplicate_rejected(self):
        result = validate_proof_spec(spec(disclosed=[{"index": 0, "value": "v"}, {"index": 0, "value": "w"}]), SETTINGS)
        self.assertEqual(result.issues[0].kind, ErrorKind.INVALID_DISCLOSED_ENTRY)
        self.assertEqual(result.issues[0].details["position"], 1)

    def test_disclosed_index_out_of_range(self):
        result = validate_proof_spec(spec(disclosed=[{"index": 4, "value": "v"}]), SETTINGS)
        issue = result.issues[0]
        self.assertEqual(issue.kind, ErrorKind.ATTRIBUTE_INDEX_OUT_OF_RANGE)
        self.assertIsNone(issue.clause_position)
        self.assertEqual(issue.field, "disclosed[0].index")


class TestClauseDispatch(unittest.TestCase):

    def test_malformed_clauses(self):
        clauses = [
            "nym",
            {"clauseData": {"attrs": [0], "crypto_val": "v"}},
            {"type": "nym"},
            {"type": 3, "clauseData": {}},
            {"type": "nym", "clauseData": [0]},
        ]
        result = validate_proof_spec(spec(clauses=clauses), SETTINGS)
        self.assertEqual([i.kind for i in result.issues], [ErrorKind.MALFORMED_CLAUSE] * 5)
        self.assertEqual([i.clause_position for i in result.issues], [0, 1, 2, 3, 4])

    def test_unknown_type(self):
        result = validate_proof_spec(spec(clauses=[nym(0), {"type": "Nym", "clauseData": {}}]), SETTINGS)
        issue = result.issues[0]
        self.assertEqual(issue.kind, ErrorKind.UNKNOWN_CLAUSE_TYPE)
        self.assertEqual(issue.value, "Nym")
        self.assertEqual(issue.location(), "clauses[1].type")

    def test_issues_accumulate_across_clauses(self):
        clauses = [
            {"type": "credential", "clauseData": {"attrs": [0]}},
            nym(1),
            {"type": "commitment", "clauseData": {"attrs": [1, 1], "curve": "nope"}},
            {"type": "mystery", "clauseData": {}},
            "broken",
        ]
        result = validate_proof_spec(spec(clauses=clauses), SETTINGS)
        self.assertEqual(
            [(i.clause_position, i.kind) for i in result.issues],
            [
                (0, ErrorKind.MISSING_FIELD),
                (2, ErrorKind.DUPLICATE_ATTRIBUTE_INDEX),
                (2, ErrorKind.UNKNOWN_CURVE),
                (3, ErrorKind.UNKNOWN_CLAUSE_TYPE),
                (4, ErrorKind.MALFORMED_CLAUSE),
            ]
        )

    def test_resolver_skipped_when_clauses_invalid(self):
        # Index 9 is out of range, but clause 1 is broken so only its issue is reported
        result = validate_proof_spec(spec(clauses=[nym(9), {"type": "nym", "clauseData": {"attrs": [0]}}]), SETTINGS)
        self.assertEqual([i.kind for i in result.issues], [ErrorKind.MISSING_FIELD])

    def test_out_of_range_accumulates(self):
        result = validate_proof_spec(spec(clauses=[nym(0, 4), nym(-1), nym(2)]), SETTINGS)
        self.assertEqual(
            [(i.clause_position, i.value) for i in result.issues],
            [(0, 4), (1, -1)]
        )

    def test_clause_order_preserved(self):
        parsed = parse_proof_spec(spec(clauses=[nym(3), nym(1), nym(2)]), SETTINGS)
        self.assertEqual([c.attrs.to_list() for c in parsed.clauses], [[3], [1], [2]])


class TestEntryPoints(unittest.TestCase):

    def test_parse_raises_with_all_issues(self):
        with self.assertRaises(SpecValidationError) as ctx:
            parse_proof_spec(spec(clauses=[nym(), nym(1, 1)]), SETTINGS)
        self.assertEqual(
            ctx.exception.kinds,
            (ErrorKind.EMPTY_ATTRIBUTE_SET, ErrorKind.DUPLICATE_ATTRIBUTE_INDEX)
        )

    def test_validate_never_raises(self):
        for doc in (None, "text", 5, [], {}, {"attributeCount": {}, "clauses": object()}):
            self.assertFalse(validate_proof_spec(doc, SETTINGS).valid())

    def test_result_to_dict(self):
        ok = validate_proof_spec(spec(), SETTINGS).to_dict()
        self.assertTrue(ok["valid"])
        self.assertTrue(ok["spec_hash"].startswith("sha256:"))

        bad = validate_proof_spec(spec(clauses=[]), SETTINGS).to_dict()
        self.assertEqual(bad["issues"][0]["kind"], "EmptyClauseList")

    def test_json_entry_point(self):
        parsed = parse_proof_spec_json(json.dumps(spec()), SETTINGS)
        self.assertEqual(parsed.attribute_count, 4)

    def test_json_undecodable(self):
        with self.assertRaises(SpecValidationError) as ctx:
            parse_proof_spec_json("{not json", SETTINGS)
        self.assertEqual(ctx.exception.kinds, (ErrorKind.INVALID_DOCUMENT,))

    def test_parser_reusable(self):
        parser = SpecParser(SETTINGS)
        first = parser.parse(spec())
        parser.validate(spec(clauses=[]))
        self.assertEqual(parser.parse(spec()), first)


if __name__ == "__main__":
    unittest.main()
