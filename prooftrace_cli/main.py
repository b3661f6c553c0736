"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    prooftrace record --model M (--prompt TEXT | --prompt-hash H) (--output TEXT | --output-hash H)
    prooftrace batch [--hashes H ...] [--size N]
    prooftrace anchor [--batch-id ID | --hashes H ...]
    prooftrace verify [--hash H] [--record FILE] [--json] [--debug]
    prooftrace explain [--hash H] [--record FILE]
    prooftrace hash FILE
    prooftrace proof --hash H
    prooftrace stats
    prooftrace config --init

Environment Variables:
    PROOFTRACE_DATA_DIR         Data directory (default: ./data)
    PROOFTRACE_CHAIN            Chain name recorded on anchors
    PROOFTRACE_CHAIN_ID         Chain id recorded on anchors
    PROOFTRACE_LEDGER_URL       Ledger endpoint for live confirmation
    PROOFTRACE_LOG_LEVEL        Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from prooftrace_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from prooftrace_cli.commands import batch, record, verify
from prooftrace_cli.config import get_default_config_template, load_config, open_workspace


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _add_output_flags(parser: argparse.ArgumentParser, debug: bool = False) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    if debug:
        parser.add_argument(
            "--debug",
            action="store_true",
            default=False,
            help="Include detailed checks in output",
        )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="prooftrace",
        description="ProofTrace CLI - Record inferences, commit them to Merkle batches, anchor and verify.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./prooftrace.json or ~/.config/prooftrace/config.json)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Data directory (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- record command ---
    record_parser = subparsers.add_parser(
        "record",
        help="Record an inference",
        description="Hash and store inference metadata. Raw text given with --prompt/--output is hashed, never stored.",
    )
    record_parser.add_argument("--model", "-m", required=True, help="Model identifier")
    record_parser.add_argument("--prompt", default=None, help="Prompt text (hashed locally)")
    record_parser.add_argument("--prompt-hash", default=None, help="Precomputed prompt hash")
    record_parser.add_argument("--output", default=None, help="Output text (hashed locally)")
    record_parser.add_argument("--output-hash", default=None, help="Precomputed output hash")
    record_parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    record_parser.add_argument("--max-tokens", type=int, default=None, help="Token limit")
    record_parser.add_argument("--feature", default=None, help="Application feature name")
    record_parser.add_argument("--user-id", default=None, help="Application user id")
    record_parser.add_argument("--nonce", default=None, help="Optional nonce")
    _add_output_flags(record_parser)
    record_parser.set_defaults(func=record.record_cmd)

    # --- batch command ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Commit inferences to a Merkle batch",
        description="Build a batch from the given hashes or from the unbatched inferences.",
    )
    batch_parser.add_argument("--hashes", nargs="+", default=None, help="Hashes to batch")
    batch_parser.add_argument("--size", type=int, default=None, help="Maximum unbatched inferences to include")
    _add_output_flags(batch_parser)
    batch_parser.set_defaults(func=batch.batch_cmd)

    # --- anchor command ---
    anchor_parser = subparsers.add_parser(
        "anchor",
        help="Anchor a batch root",
        description="Anchor the given batch, a new batch over --hashes, or the oldest unanchored batch.",
    )
    anchor_parser.add_argument("--batch-id", default=None, help="Batch to anchor")
    anchor_parser.add_argument("--hashes", nargs="+", default=None, help="Hashes to batch and anchor")
    _add_output_flags(anchor_parser)
    anchor_parser.set_defaults(func=batch.anchor_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inference",
        description="Check an inference against its batch, proof and anchor.",
    )
    verify_parser.add_argument("--hash", default=None, help="Claimed inference hash")
    verify_parser.add_argument("--record", default=None, help="Record JSON file ('-' for stdin)")
    verify_parser.add_argument("--ledger-url", default=None, help="Ledger endpoint for live confirmation")
    _add_output_flags(verify_parser, debug=True)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- explain command ---
    explain_parser = subparsers.add_parser(
        "explain",
        help="Explain what verification proves",
    )
    explain_parser.add_argument("--hash", default=None, help="Claimed inference hash")
    explain_parser.add_argument("--record", default=None, help="Record JSON file ('-' for stdin)")
    _add_output_flags(explain_parser)
    explain_parser.set_defaults(func=verify.explain_cmd)

    # --- hash command ---
    hash_parser = subparsers.add_parser(
        "hash",
        help="Compute the content hash of a record",
    )
    hash_parser.add_argument("record", help="Record JSON file ('-' for stdin)")
    _add_output_flags(hash_parser)
    hash_parser.set_defaults(func=record.hash_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print the Merkle inclusion proof of an inference",
    )
    proof_parser.add_argument("--hash", required=True, help="Inference hash")
    _add_output_flags(proof_parser)
    proof_parser.set_defaults(func=verify.proof_cmd)

    # --- stats command ---
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show store statistics",
    )
    _add_output_flags(stats_parser)
    stats_parser.set_defaults(func=stats_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or show configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="prooftrace.json",
        help="Path for config file (default: prooftrace.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (PROOFTRACE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: prooftrace config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def stats_cmd(args: argparse.Namespace) -> int:
    """Handle stats command."""
    workspace = open_workspace(args.cli_config)
    stats = workspace.store.stats()
    stats["chain_name"] = workspace.config.chain.name
    stats["chain_id"] = workspace.config.chain.chain_id

    if args.json:
        print(json.dumps(stats, indent=2))
    else:
        for key, value in stats.items():
            print(f"{key}: {value}")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config, data_dir=args.data_dir)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.server.log_level)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
