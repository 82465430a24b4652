"""Error conditions raised by the tinysh command pipeline.

Everything a user can trigger from the prompt derives from ShellError and
is reported through the output channels; the interpreter then moves on to
the next line. ExitRequested is the one exception that is not an error:
it carries the status the interpreter should terminate with.
"""
from __future__ import annotations


class ShellError(Exception):
    """Base class for recoverable, user-facing shell errors."""


class MalformedInput(ShellError, ValueError):
    """The input line could not be split into tokens (e.g. open quote)."""


# ---- redirection ----

class RedirectionError(ShellError, ValueError):
    pass


class MissingRedirectionTarget(RedirectionError):
    pass


class InvalidRedirectionTarget(RedirectionError):
    pass


class RedirectionOpenError(RedirectionError):
    pass


# ---- builtins ----

class TooManyArguments(ShellError, ValueError):
    pass


class IncorrectArgumentCount(ShellError, ValueError):
    pass


class InvalidArgument(ShellError, ValueError):
    pass


# ---- external commands ----

class SpawnError(ShellError, OSError):
    """The resolved executable exists but the process could not be started."""


class ExitRequested(Exception):
    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code
