"""
Command-line interface for the gitmask filter.

This module wires the manifest and the substitution engine to git's
clean/smudge filter protocol:
- clean   plaintext tokens -> obfuscated tokens (working copy -> index)
- smudge  obfuscated tokens -> plaintext tokens (index -> working copy)

Filtered content is read from stdin and written to stdout. Everything
else (errors, diagnostics, help) goes to stderr, since stdout belongs
to git.
"""

from __future__ import annotations

import sys
import argparse
from typing import BinaryIO, List, Optional

from .config import (
    TOOL_VERSION,
    USAGE_MESSAGE,
    get_profile_name,
    is_verbose_env,
)
from .engine import (
    Direction,
    GitmaskError,
    InvalidDirection,
    count_occurrences,
    transform_bytes,
)
from .manifest import Manifest, ProfileConfig, resolve_manifest
from .utils import decode_lossless, read_all, write_all


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colored(text: str, color: str) -> str:
    """Return colored text when stderr is a terminal."""
    if not sys.stderr.isatty():
        return text
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str) -> None:
    """Print error message to stderr."""
    print(colored(f"✗ Error: {msg}", Colors.RED), file=sys.stderr)


def print_warning(msg: str) -> None:
    """Print warning message to stderr."""
    print(colored(f"⚠ Warning: {msg}", Colors.YELLOW), file=sys.stderr)


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Per-invocation state. Nothing survives between runs."""

    def __init__(
        self,
        manifest_path: Optional[str],
        profile: Optional[str],
        verbose: bool,
    ):
        self.manifest_path = manifest_path
        self.profile_name = profile or get_profile_name()
        self.verbose = verbose

        # Lazy-loaded
        self._manifest: Optional[Manifest] = None

    @property
    def manifest(self) -> Manifest:
        """Resolve and load the manifest lazily."""
        if self._manifest is None:
            self._manifest = resolve_manifest(self.manifest_path)
        return self._manifest

    @property
    def profile(self) -> ProfileConfig:
        return self.manifest.get_profile(self.profile_name)

    def log_verbose(self, msg: str) -> None:
        """Log diagnostic message to stderr if verbose."""
        if self.verbose:
            print(colored(f"  → {msg}", Colors.BLUE), file=sys.stderr)


# ---------------------------------------------------------------------------
# Command implementation
# ---------------------------------------------------------------------------


def cmd_filter(
    ctx: CLIContext,
    direction: Direction,
    source: BinaryIO,
    sink: BinaryIO,
    path: Optional[str] = None,
) -> int:
    """
    Run one clean or smudge pass from ``source`` to ``sink``.
    """
    manifest = ctx.manifest
    profile = ctx.profile
    mapping = profile.mapping

    ctx.log_verbose(f"Direction: {direction.value}")
    if path:
        ctx.log_verbose(f"Path: {path}")
    ctx.log_verbose(f"Manifest: {manifest.describe_source()}")
    ctx.log_verbose(f"Profile: {profile.name} ({len(mapping)} entries)")

    data = read_all(source)
    output = transform_bytes(data, direction, mapping, manifest.encoding)

    if ctx.verbose:
        counts = count_occurrences(decode_lossless(data, manifest.encoding), direction, mapping)
        for idx, count in enumerate(counts):
            ctx.log_verbose(f"Entry #{idx}: {count} replacement(s)")
        if not mapping:
            print_warning("Mapping is empty, content passes through unchanged")

    written = write_all(sink, output)
    ctx.log_verbose(f"Wrote {written} bytes")
    return 0


def cmd_help() -> int:
    """
    Show help message.
    """
    help_text = f"""
{colored('gitmask', Colors.BOLD)} — mask literal secrets in version-controlled files

{colored('USAGE:', Colors.CYAN)}
  gitmask [options] clean|smudge [path]

{colored('DESCRIPTION:', Colors.CYAN)}
  gitmask is a git clean/smudge filter. It replaces configured plaintext
  tokens (e.g. passwords) with obfuscated stand-ins on the way into the
  repository, and restores them on checkout.

  This is substitution, not encryption. Anyone holding the mapping can
  reverse it.

{colored('DIRECTIONS:', Colors.CYAN)}
  clean       plaintext -> obfuscated (stdin to stdout)
  smudge      obfuscated -> plaintext (stdin to stdout)

{colored('OPTIONS:', Colors.CYAN)}
  -m, --manifest PATH       Mapping file (default: .gitmask.yml if present,
                            otherwise the built-in mapping)
  -p, --profile NAME        Mapping profile to use (default: default)
  -v, --verbose             Print diagnostics to stderr
  --version                 Print version and exit
  -h, --help                Show this help message and exit

{colored('ENVIRONMENT:', Colors.CYAN)}
  GITMASK_MANIFEST          Mapping file path
  GITMASK_PROFILE           Mapping profile name
  GITMASK_VERBOSE           Enable diagnostics (1/true/yes/on)

{colored('GIT SETUP:', Colors.CYAN)}
  git config filter.gitmask.clean  "gitmask clean %f"
  git config filter.gitmask.smudge "gitmask smudge %f"
  echo "config/*.properties filter=gitmask" >> .gitattributes

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""
    print(help_text, file=sys.stderr)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gitmask",
        description="Mask literal secrets in version-controlled files",
        add_help=False,
    )

    parser.add_argument(
        "-m", "--manifest",
        default=None,
        help="Path to mapping file",
    )
    parser.add_argument(
        "-p", "--profile",
        default=None,
        help="Mapping profile to use",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print diagnostics to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )

    # Validated by Direction.parse so that absent and unknown values
    # produce the same usage error.
    parser.add_argument("direction", nargs="?", help="clean or smudge")
    parser.add_argument("path", nargs="?", help="File being filtered (git's %%f)")

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)

    if extras:
        print_error(f"Unrecognized arguments: {' '.join(extras)}")
        print(USAGE_MESSAGE, file=sys.stderr)
        return 1

    if args.help:
        return cmd_help()

    if args.version:
        print(f"gitmask {TOOL_VERSION}")
        return 0

    try:
        direction = Direction.parse(args.direction)
    except InvalidDirection:
        print(USAGE_MESSAGE, file=sys.stderr)
        return 1

    verbose = args.verbose or is_verbose_env()
    ctx = CLIContext(
        manifest_path=args.manifest,
        profile=args.profile,
        verbose=verbose,
    )

    source = stdin if stdin is not None else sys.stdin.buffer
    sink = stdout if stdout is not None else sys.stdout.buffer

    try:
        return cmd_filter(ctx, direction, source, sink, path=args.path)
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except GitmaskError as e:
        print_error(str(e))
        return 1
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
