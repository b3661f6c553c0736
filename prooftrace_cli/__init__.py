"""
Module 09C - ProofTrace CLI

Command-line interface for recording, batching, anchoring and verifying
inferences against a local data directory.

Usage:
    python -m prooftrace_cli record --model gpt-4 --prompt "..." --output "..."
    python -m prooftrace_cli batch
    python -m prooftrace_cli anchor
    python -m prooftrace_cli verify --hash 0x...
"""

__version__ = "0.1.0"
