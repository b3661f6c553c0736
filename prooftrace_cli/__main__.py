"""
Module execution entry point.

Allows running with: python -m prooftrace_cli
"""

import sys
from prooftrace_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
