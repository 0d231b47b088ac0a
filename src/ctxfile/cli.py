"""
CLI entrypoint for ctxfile package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .core import (
    DEFAULT_OUTPUT,
    ScanConfig,
    generate,
    WalkError,
    OutputWriteError,
)
from .matcher import split_patterns

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ctxfile",
        description="Generate a context file containing a project tree + file contents.",
    )
    p.add_argument("--dir", type=Path, default=Path("."), help="Directory to process")
    p.add_argument(
        "--include",
        default="",
        help="Comma-separated list of include patterns (default: everything)",
    )
    p.add_argument(
        "--exclude",
        default="",
        help="Comma-separated list of exclude patterns, checked before --include",
    )
    p.add_argument(
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Output file name, written inside --dir (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "--gitignore",
        action="store_true",
        help="Also skip files matched by the root .gitignore",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)

def _config_from_args(ns: argparse.Namespace) -> ScanConfig:
    return ScanConfig(
        root=ns.dir,
        include=split_patterns(ns.include),
        exclude=split_patterns(ns.exclude),
        output=ns.output,
        use_gitignore=ns.gitignore,
        verbose=ns.verbose,
    )

def main(argv: Optional[List[str]] = None) -> None:
    just_fix_windows_console()
    try:
        config = _config_from_args(_parse_args(argv))

        try:
            out_path = generate(config)
        except WalkError as e:
            print(f"Error walking directory: {e}", file=sys.stderr)
            sys.exit(1)
        except OutputWriteError as e:
            print(f"Error writing output file: {e}", file=sys.stderr)
            sys.exit(1)

        if out_path is None:
            print("No matching files found")
            sys.exit(0)

        print(Fore.GREEN + f"Output file created at: {out_path}" + Style.RESET_ALL)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
