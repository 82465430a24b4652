#!/usr/bin/env python3

# Entry of tinysh

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

try:
    import readline  # type: ignore
except Exception:  # pragma: no cover - fallback when readline unavailable
    readline = None

READLINE_ACTIVE = bool(readline)

__version__ = "0.1.0"

PROMPT = "$ "
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

from errors import ExitRequested  # local modules in the same folder
from ops import ShellSession, execute_line


def setup_readline() -> None:
    # no line editing when stdin is a pipe or file
    if not (READLINE_ACTIVE and sys.stdin.isatty()):
        return
    try:
        readline.parse_and_bind("set editing-mode emacs")
        readline.parse_and_bind("Control-l: clear-screen")
    except Exception:
        pass


def configure_logging(debug: bool = False) -> None:
    """Route internal tracing to stderr; quiet unless debug is on."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def repl(session: Optional[ShellSession] = None, prompt: str = PROMPT) -> int:
    """Read-eval loop. Returns the status the process should exit with."""
    if session is None:
        session = ShellSession()

    setup_readline()

    last_status = 0
    while True:
        try:
            line = input(prompt)
        except EOFError:
            # Ctrl-D on empty line -> exit
            print()
            break
        except KeyboardInterrupt:
            # Ctrl-C at prompt -> new line and continue
            print()
            continue

        if not line.strip():
            continue

        try:
            last_status = execute_line(line, session)
        except ExitRequested as e:
            return e.code
        except Exception as e:
            print(f"tinysh: error: {e}", file=sys.stderr)
            last_status = 1

    return last_status


def parse_args(args=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="tinysh",
        description="tinysh - a small line-oriented command interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Builtins: exit [code], echo <args...>, pwd, type <name>, cd [path]
Redirection: > 1> 2> (truncate), >> 1>> 2>> (append); first operator only

Examples:
  tinysh                       # Interactive prompt
  tinysh --prompt '> '         # Custom prompt
  tinysh --path /usr/bin:/bin  # Restrict the command search path
"""
    )

    parser.add_argument(
        "--prompt", "-p",
        default=os.environ.get("TINYSH_PROMPT", PROMPT),
        help="Prompt string (default: $TINYSH_PROMPT or '$ ')"
    )
    parser.add_argument(
        "--path",
        metavar="PATHLIST",
        help="Search path for external commands (default: $PATH)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=env_flag("TINYSH_DEBUG"),
        help="Log internal tracing to stderr (or set TINYSH_DEBUG=1)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser.parse_args(args)


def main() -> None:
    args = parse_args()
    configure_logging(args.debug)
    session = ShellSession(path=args.path)
    sys.exit(repl(session, prompt=args.prompt))


if __name__ == "__main__":
    main()
