"""Output/error redirection for a single command line.

Supported operators (each must be its own token, followed by a target):

    >   1>   2>      truncate-create the target
    >>  1>>  2>>     append-create the target

An operator containing '2' redirects stderr, every other one stdout. Only
the first operator on a line is honored; anything after it stays in the
argument list untouched.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from channels import ChannelPair, FileSink
from errors import InvalidRedirectionTarget, MissingRedirectionTarget, RedirectionOpenError

logger = logging.getLogger(__name__)

WRITE_OPERATORS = (">", "1>", "2>")
APPEND_OPERATORS = (">>", "1>>", "2>>")
OPERATORS = WRITE_OPERATORS + APPEND_OPERATORS


@dataclass(frozen=True)
class RedirectionDirective:
    stream: str  # 'stdout' or 'stderr'
    append: bool
    target: str

    @classmethod
    def from_operator(cls, op: str, target: str) -> "RedirectionDirective":
        if op not in OPERATORS:
            raise ValueError(f"not a redirection operator: {op}")
        stream = "stderr" if "2" in op else "stdout"
        return cls(stream=stream, append=op in APPEND_OPERATORS, target=target)


def find_operator(tokens: List[str]) -> Optional[int]:
    """Index of the first redirection operator token, or None."""
    for i, tok in enumerate(tokens):
        if tok in OPERATORS:
            return i
    return None


def resolve_target(target: str, cwd: Optional[str] = None) -> str:
    if cwd is None or os.path.isabs(target):
        return target
    return os.path.join(cwd, target)


def parse_redirection(tokens: List[str], channels: ChannelPair, cwd: Optional[str] = None) -> Optional[RedirectionDirective]:
    """Apply the first redirection found in tokens.

    On success the operator and its target are removed from tokens (in
    place) and the matching entry of channels is replaced by a FileSink the
    pair now owns. Relative targets are resolved against cwd when given.
    Returns the applied directive, or None when the line has no operator.
    """
    i = find_operator(tokens)
    if i is None:
        return None

    if i + 1 >= len(tokens):
        raise MissingRedirectionTarget("Redirection target missing")

    directive = RedirectionDirective.from_operator(tokens[i], tokens[i + 1])
    path = resolve_target(directive.target, cwd)

    parent = os.path.dirname(path) or os.curdir
    if not os.path.isdir(parent):
        raise InvalidRedirectionTarget("Redirection target doesn't exist")

    try:
        sink = FileSink(path, append=directive.append)
    except OSError as e:
        raise RedirectionOpenError("Failed to open redirection target for writing") from e

    channels.replace(directive.stream, sink)
    del tokens[i:i + 2]
    logger.debug("redirected %s to %r (append=%s)", directive.stream, path, directive.append)
    return directive
