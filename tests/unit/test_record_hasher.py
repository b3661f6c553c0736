"""
Module 02 - Record Hashing Unit Tests
Tests for core/crypto/record_hasher.py

Content hashes must be stable under key order, hex letter case and
empty optional mappings, and change under any real edit.
"""

import json

import pytest
from pydantic import ValidationError

from core.crypto.hashing import hash_canonical, is_content_hash
from core.crypto.record_hasher import hash_record, prepare_for_hashing, verify_record_hash
from core.schemas.errors import CanonicalizationException
from core.schemas.records import InferenceRecord

from fixtures.common import make_hash, make_record


PROMPT = "0x" + "aa" * 32
OUTPUT = "0x" + "bb" * 32


class TestProjection:
    """The normalized projection that gets hashed."""

    def test_minimal_record(self):
        projection = prepare_for_hashing(
            {"model": "gpt-4", "prompt_hash": PROMPT.upper().replace("0X", "0x"), "output_hash": OUTPUT}
        )
        assert projection == {"model": "gpt-4", "prompt_hash": PROMPT, "output_hash": OUTPUT}

    def test_missing_prefix_added(self):
        projection = prepare_for_hashing({"model": "m", "prompt_hash": "aa" * 32, "output_hash": OUTPUT})
        assert projection["prompt_hash"] == PROMPT

    def test_empty_mappings_dropped(self):
        projection = prepare_for_hashing(make_record(parameters={}, context={}))
        assert "parameters" not in projection
        assert "context" not in projection

    def test_optional_scalars_kept_when_set(self):
        projection = prepare_for_hashing(make_record(timestamp=0, nonce=""))
        assert projection["timestamp"] == 0
        assert projection["nonce"] == ""

    def test_optional_scalars_dropped_when_none(self):
        projection = prepare_for_hashing(make_record(timestamp=None))
        assert "timestamp" not in projection
        assert "nonce" not in projection

    def test_unknown_keys_ignored(self):
        base = {"model": "m", "prompt_hash": PROMPT, "output_hash": OUTPUT}
        assert hash_record({**base, "extra": "x"}) == hash_record(base)


class TestHashStability:
    """Equivalent records hash identically."""

    def test_key_order_invariant(self):
        a = {"model": "gpt-4", "prompt_hash": PROMPT, "output_hash": OUTPUT}
        b = {"output_hash": OUTPUT, "prompt_hash": PROMPT, "model": "gpt-4"}
        assert hash_record(a) == hash_record(b)

    def test_hex_case_invariant(self):
        lower = {"model": "gpt-4", "prompt_hash": PROMPT, "output_hash": OUTPUT}
        upper = {"model": "gpt-4", "prompt_hash": "0x" + "AA" * 32, "output_hash": "0X" + "BB" * 32}
        assert hash_record(lower) == hash_record(upper)

    def test_nested_key_order_invariant(self):
        a = make_record(parameters={"temperature": 0.7, "max_tokens": 100})
        b = make_record(parameters={"max_tokens": 100, "temperature": 0.7})
        assert hash_record(a) == hash_record(b)

    def test_empty_mapping_same_as_absent(self):
        assert hash_record(make_record(context={})) == hash_record(make_record(context=None))

    def test_model_and_mapping_hash_same(self, record):
        assert hash_record(record) == hash_record(record.model_dump())

    def test_equals_canonical_hash_of_projection(self, record):
        assert hash_record(record) == hash_canonical(prepare_for_hashing(record))

    def test_hash_is_content_hash(self, record):
        assert is_content_hash(hash_record(record))


class TestTamperSensitivity:
    """Any real edit changes the hash."""

    @pytest.mark.parametrize("change", [
        {"model": "gpt-4o"},
        {"prompt_hash": make_hash("other prompt")},
        {"output_hash": make_hash("other output")},
        {"parameters": {"temperature": 0.8}},
        {"context": {"feature": "chat"}},
        {"timestamp": 1},
        {"nonce": "n1"},
    ])
    def test_field_change_changes_hash(self, record, change):
        changed = record.model_copy(update=change)
        assert hash_record(changed) != hash_record(record)

    def test_parameter_value_change(self):
        a = make_record(parameters={"temperature": 0.7})
        b = make_record(parameters={"temperature": 0.70001})
        assert hash_record(a) != hash_record(b)


class TestVerifyRecordHash:
    """Checking a claimed hash against a record."""

    def test_matching_claim(self, record):
        assert verify_record_hash(record, hash_record(record))

    def test_claim_case_and_prefix_insensitive(self, record):
        claimed = hash_record(record)
        assert verify_record_hash(record, claimed.upper().replace("0X", "0x"))
        assert verify_record_hash(record, claimed[2:])

    def test_wrong_claim(self, record):
        assert not verify_record_hash(record, make_hash("something else"))

    def test_malformed_claim_does_not_match(self, record):
        assert not verify_record_hash(record, "0x1234")


class TestInvalidInput:
    """Structural misuse raises."""

    def test_missing_fields_raise(self):
        with pytest.raises(ValidationError):
            hash_record({"model": "gpt-4"})

    def test_non_hex_hash_field_raises(self):
        with pytest.raises(ValidationError):
            InferenceRecord(model="m", prompt_hash="not-hex", output_hash=OUTPUT)

    def test_empty_model_raises(self):
        with pytest.raises(ValidationError):
            InferenceRecord(model="", prompt_hash=PROMPT, output_hash=OUTPUT)

    def test_wrong_type_raises(self):
        with pytest.raises(TypeError):
            hash_record(["not", "a", "record"])

    def test_unencodable_parameter_raises_structural_error(self):
        record = json.loads(
            '{"model": "m", "prompt_hash": "0xaa", "output_hash": "0xbb", '
            '"parameters": {"x": "\\ud800"}}'
        )
        with pytest.raises(CanonicalizationException) as exc_info:
            hash_record(record)
        assert exc_info.value.details["path"] == "parameters.x"
