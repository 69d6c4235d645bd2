"""Single `ascii-engine` entry point dispatching to the command modules."""

import importlib
import sys
from typing import List, Optional, Sequence

PROG = "ascii-engine"

# Each module exposes main(argv) -> int
COMMANDS = {
    "image": "ascii_engine.image_to_ascii",
    "text": "ascii_engine.text_to_ascii",
}


def usage() -> None:
    print(f"Usage: {PROG} <command> [args...]")
    print(f"Commands: {', '.join(sorted(COMMANDS))}")
    print(f"Run '{PROG} <command> --help' for command options.")


def _call_entry(entry, argv: List[str]) -> int:
    """Run a command's main, turning argparse exits into return codes."""
    try:
        return entry(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0
    except Exception as exc:
        print(f"Error running command: {exc}", file=sys.stderr)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or args[0] in ("-h", "--help"):
        usage()
        return 0

    if args[0] == "--version":
        from ascii_engine import __version__

        print(f"{PROG} {__version__}")
        return 0

    cmd, rest = args[0], args[1:]
    module_path = COMMANDS.get(cmd)
    if module_path is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return 2

    try:
        module = importlib.import_module(module_path)
    except Exception as exc:
        print(f"Failed to import command '{cmd}' ({module_path}): {exc}", file=sys.stderr)
        return 3

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return 4

    return _call_entry(entry, rest)


if __name__ == "__main__":
    raise SystemExit(main())
