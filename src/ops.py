from __future__ import annotations

import logging
import os
from typing import Dict, Optional, TextIO

from channels import ChannelPair
from command import classify, run_external
from errors import MalformedInput, RedirectionError
from lexer import format_tokens, tokenize
from redirection import parse_redirection
from shell_builtins import run_builtin

logger = logging.getLogger(__name__)

EXIT_SYNTAX_ERROR = 2


# ---- working directory ----

class WorkingDirectory:
    """Where relative paths resolve and what `pwd` prints."""

    def get(self) -> str:
        raise NotImplementedError

    def set(self, path: str) -> None:
        """Change directory; raise OSError when path cannot be entered."""
        raise NotImplementedError


class ProcessWorkingDirectory(WorkingDirectory):
    """The real process working directory (os.getcwd / os.chdir)."""

    def get(self) -> str:
        return os.getcwd()

    def set(self, path: str) -> None:
        os.chdir(path)


class VirtualWorkingDirectory(WorkingDirectory):
    """A working directory held as a string, leaving the process untouched.

    Relative paths resolve against the current value and the result is
    normalized lexically ('..' drops the previous segment), which is what
    the kernel reports after a chdir outside of symlinked paths.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = os.path.abspath(path if path is not None else os.getcwd())

    def get(self) -> str:
        return self._path

    def set(self, path: str) -> None:
        if not path:
            raise FileNotFoundError(2, "No such file or directory", path)
        target = os.path.normpath(os.path.join(self._path, path))
        if not os.path.exists(target):
            raise FileNotFoundError(2, "No such file or directory", path)
        if not os.path.isdir(target):
            raise NotADirectoryError(20, "Not a directory", path)
        if not os.access(target, os.X_OK):
            raise PermissionError(13, "Permission denied", path)
        self._path = target


# ---- session ----

class ShellSession:
    """Holds the state that outlives a single line.

    - cwd: a WorkingDirectory (process-backed by default)
    - path: the search path, captured once at construction
    - env: string environment handed to spawned processes
    - stdout/stderr: console streams; None means "sys.stdout/sys.stderr at
      write time"
    """

    def __init__(
        self,
        cwd: Optional[WorkingDirectory] = None,
        path: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.cwd: WorkingDirectory = cwd if cwd is not None else ProcessWorkingDirectory()
        self.env: Dict[str, str] = dict(os.environ) if env is None else dict(env)
        self.path: str = path if path is not None else self.env.get("PATH", os.defpath)
        self.stdout = stdout
        self.stderr = stderr

    @property
    def home(self) -> Optional[str]:
        return self.env.get("HOME") or None

    def new_channels(self) -> ChannelPair:
        return ChannelPair.console(self.stdout, self.stderr)


# ---- line execution ----

def execute_line(line: str, session: ShellSession) -> int:
    """Tokenize, redirect, dispatch and run one input line.

    Returns the status of the line. A blank line is a no-op (0). Parse and
    redirection errors are reported and return non-zero without running
    anything. ExitRequested from `exit` propagates to the caller after the
    line's channels have been closed.
    """
    channels = session.new_channels()
    try:
        tokens = tokenize(line)
    except MalformedInput as e:
        channels.stderr.writeln(f"tinysh: parse error: {e}")
        return EXIT_SYNTAX_ERROR
    if not tokens:
        return 0

    with channels:
        try:
            parse_redirection(tokens, channels, session.cwd.get())
        except RedirectionError as e:
            channels.stdout.writeln(f"Failed to parse redirection: {e}")
            return 1

        kind = classify(tokens)
        logger.debug("dispatch %s: %s", kind, format_tokens(tokens))
        if kind == "empty":
            return 0
        if kind == "builtin":
            return run_builtin(tokens, session, channels)
        return run_external(
            tokens,
            session.path,
            channels,
            cwd=session.cwd.get(),
            env=session.env,
        )
