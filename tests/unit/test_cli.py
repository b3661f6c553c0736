"""
Module 09C - CLI Tests

Runs prooftrace_cli.main.main against a temporary data directory and checks
output and exit codes.
"""

import json

import pytest

from prooftrace_cli.commands import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from prooftrace_cli.main import create_parser, main

from fixtures.common import make_hash


@pytest.fixture
def cli(tmp_path, monkeypatch, capsys):
    """Run the CLI in an isolated working directory; returns (code, stdout, stderr)."""
    monkeypatch.chdir(tmp_path)
    data_dir = str(tmp_path / "data")

    def run(*argv):
        code = main(["--data-dir", data_dir, *argv])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return run


def _record(cli, nonce: str) -> dict:
    code, out, _ = cli(
        "record", "--model", "gpt-4",
        "--prompt", "What is 2+2?", "--output", "4",
        "--temperature", "0.7", "--nonce", nonce, "--json",
    )
    assert code == EXIT_SUCCESS
    return json.loads(out)


def _record_batch_anchor(cli, count: int = 3) -> list[dict]:
    stored = [_record(cli, f"n{i}") for i in range(count)]
    assert cli("batch")[0] == EXIT_SUCCESS
    assert cli("anchor")[0] == EXIT_SUCCESS
    return stored


class TestParser:
    """Argument parsing."""

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage: prooftrace" in capsys.readouterr().out

    def test_subcommands(self):
        parser = create_parser()
        args = parser.parse_args(["verify", "--hash", "0xab", "--json", "--debug"])
        assert args.command == "verify"
        assert args.json and args.debug

    def test_proof_requires_hash(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["proof"])


class TestRecord:
    """prooftrace record / hash."""

    def test_record(self, cli, tmp_path):
        stored = _record(cli, "a")
        record = stored["record"]
        assert record["model"] == "gpt-4"
        assert record["parameters"] == {"temperature": 0.7}
        assert record["timestamp"] is not None
        assert (tmp_path / "data" / "inferences" / f"{stored['inference_hash'][2:]}.json").exists()

    def test_raw_text_is_hashed(self, cli):
        record = _record(cli, "a")["record"]
        assert record["prompt_hash"] == make_hash("What is 2+2?")
        assert record["output_hash"] == make_hash("4")

    def test_missing_output(self, cli):
        code, _, err = cli("record", "--model", "gpt-4", "--prompt", "hi")
        assert code == EXIT_RUNTIME_ERROR
        assert "--output" in err

    def test_hash_matches_record(self, cli, tmp_path):
        stored = _record(cli, "a")
        path = tmp_path / "record.json"
        path.write_text(json.dumps(stored["record"]))

        code, out, _ = cli("hash", str(path))
        assert code == EXIT_SUCCESS
        assert out.strip() == stored["inference_hash"]


class TestBatchAndAnchor:
    """prooftrace batch / anchor."""

    def test_batch_unbatched(self, cli):
        _record(cli, "a")
        _record(cli, "b")
        code, out, _ = cli("batch", "--json")
        assert code == EXIT_SUCCESS
        assert json.loads(out)["leaf_count"] == 2

    def test_batch_nothing(self, cli):
        code, _, err = cli("batch")
        assert code == EXIT_RUNTIME_ERROR
        assert "No unbatched inferences" in err

    def test_anchor_nothing(self, cli):
        code, _, err = cli("anchor")
        assert code == EXIT_RUNTIME_ERROR
        assert "No unanchored batches" in err

    def test_anchor_hashes(self, cli):
        code, out, _ = cli("anchor", "--hashes", make_hash("a"), make_hash("b"), "--json")
        assert code == EXIT_SUCCESS
        assert json.loads(out)["block_number"] == 1

    def test_block_numbers_continue_across_runs(self, cli):
        cli("anchor", "--hashes", make_hash("a"))
        code, out, _ = cli("anchor", "--hashes", make_hash("b"), "--json")
        assert code == EXIT_SUCCESS
        assert json.loads(out)["block_number"] == 2

    def test_anchor_same_hashes_twice(self, cli):
        hashes = (make_hash("a"), make_hash("b"))
        assert cli("anchor", "--hashes", *hashes)[0] == EXIT_SUCCESS

        code, _, err = cli("anchor", "--hashes", *hashes)
        assert code == EXIT_RUNTIME_ERROR
        assert "already anchored" in err.lower()

        code, out, _ = cli("stats", "--json")
        stats = json.loads(out)
        assert stats["batches"] == 1
        assert stats["unanchored_batches"] == 0

    def test_reanchor_fails(self, cli):
        _record(cli, "a")
        cli("batch")
        code, out, _ = cli("anchor", "--json")
        batch_id = json.loads(out)["batch_id"]

        code, _, err = cli("anchor", "--batch-id", batch_id)
        assert code == EXIT_RUNTIME_ERROR
        assert "already anchored" in err.lower()


class TestVerify:
    """prooftrace verify / explain / proof."""

    def test_verified(self, cli):
        stored = _record_batch_anchor(cli)
        code, out, _ = cli("verify", "--hash", stored[0]["inference_hash"])
        assert code == EXIT_SUCCESS
        assert out.startswith("[VERIFIED] Inference verified successfully")

    def test_verified_json_debug(self, cli):
        stored = _record_batch_anchor(cli)
        code, out, _ = cli("verify", "--hash", stored[1]["inference_hash"], "--json", "--debug")
        summary = json.loads(out)
        assert code == EXIT_SUCCESS
        assert summary["verified"] is True
        assert summary["block_number"] == 1
        assert [c["check_id"] for c in summary["checks"]] == [
            "resolve_identity",
            "locate_batch",
            "merkle_proof",
            "locate_anchor",
            "ledger_confirmation",
        ]

    def test_verify_by_record_file(self, cli, tmp_path):
        stored = _record_batch_anchor(cli)
        path = tmp_path / "record.json"
        path.write_text(json.dumps(stored[2]["record"]))
        assert cli("verify", "--record", str(path))[0] == EXIT_SUCCESS

    def test_not_batched(self, cli):
        stored = _record(cli, "a")
        code, out, _ = cli("verify", "--hash", stored["inference_hash"], "--json")
        assert code == EXIT_VERIFICATION_FAILED
        assert json.loads(out)["error"]["code"] == "NOT_BATCHED"

    def test_tampered_record(self, cli, tmp_path):
        stored = _record_batch_anchor(cli)
        record = dict(stored[0]["record"], model="gpt-3.5")
        path = tmp_path / "record.json"
        path.write_text(json.dumps(record))

        code, out, _ = cli("verify", "--record", str(path), "--hash", stored[0]["inference_hash"], "--json")
        assert code == EXIT_VERIFICATION_FAILED
        assert json.loads(out)["error"]["code"] == "HASH_MISMATCH"

    def test_no_input(self, cli):
        code, _, err = cli("verify")
        assert code == EXIT_RUNTIME_ERROR
        assert "--hash" in err

    def test_explain(self, cli):
        stored = _record_batch_anchor(cli)
        code, out, _ = cli("explain", "--hash", stored[0]["inference_hash"], "--json")
        assert code == EXIT_SUCCESS
        explanation = json.loads(out)
        assert "The Merkle proof is mathematically valid" in explanation["proven"]

    def test_proof(self, cli):
        stored = _record_batch_anchor(cli, count=4)
        code, out, _ = cli("proof", "--hash", stored[0]["inference_hash"], "--json")
        proof = json.loads(out)
        assert code == EXIT_SUCCESS
        assert proof["leaf"] == stored[0]["inference_hash"]
        assert len(proof["sibling_path"]) == 2

    def test_proof_not_batched(self, cli):
        code, _, err = cli("proof", "--hash", make_hash("nowhere"))
        assert code == EXIT_RUNTIME_ERROR
        assert "not found in any batch" in err


class TestStatsAndConfig:
    """prooftrace stats / config."""

    def test_stats(self, cli):
        _record_batch_anchor(cli, count=2)
        _record(cli, "pending")
        code, out, _ = cli("stats", "--json")
        stats = json.loads(out)
        assert code == EXIT_SUCCESS
        assert stats["inferences"] == 3
        assert stats["anchors"] == 1
        assert stats["unbatched_inferences"] == 1
        assert stats["chain_name"] == "local"

    def test_config_init(self, cli, tmp_path):
        code, out, _ = cli("config", "--init")
        assert code == EXIT_SUCCESS
        written = json.loads((tmp_path / "prooftrace.json").read_text())
        assert written["chain"]["name"] == "local"

        code, _, err = cli("config", "--init")
        assert code == EXIT_RUNTIME_ERROR
        assert "already exists" in err

    def test_config_show_reflects_data_dir(self, cli, tmp_path):
        code, out, _ = cli("config", "--show")
        assert code == EXIT_SUCCESS
        assert json.loads(out)["storage"]["data_dir"] == str(tmp_path / "data")

    def test_bad_config_file(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert main(["--config", str(path), "stats"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err
