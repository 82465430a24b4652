# module for command classification and external command execution

from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, List, Optional

from channels import ChannelPair
from errors import SpawnError

logger = logging.getLogger(__name__)

# Names handled inside the interpreter; everything else is looked up on the search path.
BUILTIN_NAMES = ("exit", "echo", "pwd", "type", "cd")

EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126


def is_builtin(name: str) -> bool:
    return name in BUILTIN_NAMES


def classify(tokens: List[str]) -> str:
    """Return 'empty', 'builtin' or 'external' for a redirection-stripped command line."""
    if not tokens:
        return "empty"
    if is_builtin(tokens[0]):
        return "builtin"
    return "external"


def find_executable(name: str, search_path: str, cwd: Optional[str] = None) -> Optional[str]:
    """Resolve name against search_path, first match wins.

    A directory qualifies when joining it with name gives an existing
    regular file; the execute bit is not checked here. An empty entry in
    the list stands for the current directory, and relative entries are
    taken relative to it (cwd when given).
    """
    if not name:
        return None
    for directory in search_path.split(os.pathsep):
        if not directory:
            directory = cwd or os.curdir
        elif cwd is not None and not os.path.isabs(directory):
            directory = os.path.join(cwd, directory)
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


class CommandRunner:
    """Run one external command to completion and forward its output.

    Lifecycle:
    - Initialize with argv (argv[0] is the name as typed) and the resolved
      executable path.
    - Call run(channels); stdout/stderr are captured whole, decoded with
      invalid sequences replaced, then written to the channel pair.
    - After running, access exit_code, stdout, stderr.

    No TTY passthrough: interactive programs see pipes, not the terminal.
    """

    def __init__(self, argv: List[str], executable: str, cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> None:
        self.argv: List[str] = list(argv)
        self.executable: str = executable
        self.cwd: Optional[str] = cwd
        self.env: Optional[Dict[str, str]] = dict(env) if env is not None else None
        self.exit_code: Optional[int] = None
        self.stdout: Optional[str] = None
        self.stderr: Optional[str] = None

    def spawn(self) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                self.argv,
                executable=self.executable,
                cwd=self.cwd,
                env=self.env,
                capture_output=True,
            )
        except OSError as e:
            reason = e.strerror or str(e)
            raise SpawnError(e.errno, reason, self.executable) from e

    def run(self, channels: ChannelPair) -> int:
        """Spawn, wait, forward output. Returns the child's exit status."""
        completed = self.spawn()
        self.exit_code = completed.returncode
        self.stdout = completed.stdout.decode("utf-8", errors="replace")
        self.stderr = completed.stderr.decode("utf-8", errors="replace")
        logger.debug("%s exited with %s", self.executable, self.exit_code)

        if self.stdout:
            channels.stdout.write(self.stdout)
        if self.stderr:
            channels.stderr.write(self.stderr)
        return self.exit_code


def run_external(argv: List[str], search_path: str, channels: ChannelPair, *, cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> int:
    """Look up argv[0] and run it; report not-found and spawn failures."""
    name = argv[0]
    executable = find_executable(name, search_path, cwd)
    if executable is None:
        channels.stdout.writeln(f"{name}: command not found")
        return EXIT_NOT_FOUND

    logger.debug("resolved %r to %r", name, executable)
    runner = CommandRunner(argv, executable, cwd=cwd, env=env)
    try:
        return runner.run(channels)
    except SpawnError as e:
        channels.stdout.writeln(f"{name}: {e.strerror}")
        return EXIT_CANNOT_EXECUTE
