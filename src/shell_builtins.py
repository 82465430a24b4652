"""Builtin commands: exit, echo, pwd, type, cd.

Each executor takes (args, session, channels) and returns a status code.
Argument errors are raised as ShellError subclasses and reported on the
stdout channel by run_builtin; the interpreter always continues, except
for a valid `exit`, which raises ExitRequested.
"""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable, Dict, List

from channels import ChannelPair
from command import find_executable, is_builtin
from errors import ExitRequested, IncorrectArgumentCount, InvalidArgument, ShellError, TooManyArguments

if TYPE_CHECKING:
    from ops import ShellSession

logger = logging.getLogger(__name__)

Builtin = Callable[[List[str], "ShellSession", ChannelPair], int]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I32_MIN, _I32_MAX = -(2 ** 31), 2 ** 31 - 1


def parse_exit_code(arg: str) -> int:
    """Parse an `exit` argument as a signed 32-bit decimal integer."""
    if not _INT_RE.fullmatch(arg):
        raise InvalidArgument(f"exit: {arg}: numeric argument required")
    code = int(arg)
    if not _I32_MIN <= code <= _I32_MAX:
        raise InvalidArgument(f"exit: {arg}: numeric argument required")
    return code


def builtin_exit(args: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    if len(args) > 1:
        raise TooManyArguments("exit: too many arguments")
    code = parse_exit_code(args[0]) if args else 0
    raise ExitRequested(code)


def builtin_echo(args: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    channels.stdout.writeln(" ".join(args))
    return 0


def builtin_pwd(args: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    if args:
        raise TooManyArguments("too many arguments")
    channels.stdout.writeln(session.cwd.get())
    return 0


def builtin_type(args: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    if len(args) != 1:
        raise IncorrectArgumentCount(
            f"incorrect number of args for type command, expected 1, got {len(args)}"
        )
    name = args[0]
    if is_builtin(name):
        channels.stdout.writeln(f"{name} is a shell builtin")
        return 0
    resolved = find_executable(name, session.path, session.cwd.get())
    if resolved is not None:
        channels.stdout.writeln(f"{name} is {resolved}")
        return 0
    channels.stdout.writeln(f"{name}: not found")
    return 1


def builtin_cd(args: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    """Change the session's working directory.

    - no argument, or anything starting with '~': the home directory
    - starting with '.': joined onto the current directory as a string
    - anything else: used as given
    """
    if len(args) > 1:
        raise TooManyArguments("too many arguments")

    if not args or args[0].startswith("~"):
        home = session.home
        if not home:
            channels.stdout.writeln("cd: HOME not set")
            return 1
        target = home
    elif args[0].startswith("."):
        target = f"{session.cwd.get()}/{args[0]}"
    else:
        target = args[0]

    try:
        session.cwd.set(target)
    except OSError as e:
        logger.debug("cd to %r failed: %s", target, e)
        channels.stdout.writeln(f"cd: {target}: No such file or directory")
        return 1
    session.env["PWD"] = session.cwd.get()
    return 0


BUILTINS: Dict[str, Builtin] = {
    "exit": builtin_exit,
    "echo": builtin_echo,
    "pwd": builtin_pwd,
    "type": builtin_type,
    "cd": builtin_cd,
}


def run_builtin(argv: List[str], session: "ShellSession", channels: ChannelPair) -> int:
    """Dispatch argv[0] to its executor and report argument errors.

    InvalidArgument (bad exit code) returns 2, other argument errors 1.
    """
    func = BUILTINS[argv[0]]
    try:
        return func(argv[1:], session, channels)
    except ShellError as e:
        channels.stdout.writeln(str(e))
        return 2 if isinstance(e, InvalidArgument) else 1
