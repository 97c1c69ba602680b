"""
Main entry point for running gitmask as a module.

Usage:
    python -m gitmask clean|smudge < input > output
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
