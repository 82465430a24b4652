"""Tokenization utilities for tinysh.

A raw input line is turned into the argv-ordered list of words the rest
of the pipeline works on. Quoting is resolved here, so later stages only
ever see plain strings.
"""
from __future__ import annotations

import logging
import shlex

from errors import MalformedInput

logger = logging.getLogger(__name__)

# shlex posix mode only honors \" and \\ inside double quotes
_DQ_EXTRA_ESCAPES = "$`\n"
_WHITESPACE = " \t\r\n"


def _prepare_line(line: str) -> str:
    """Quote-aware pre-pass run before shlex sees the line.

    - An unquoted '#' that starts a word drops the rest of the line
    - Inside double quotes, \\$ and \\` become the bare character and
      \\<newline> is removed; \\" and \\\\ are left for shlex
    """
    out: list[str] = []
    i = 0
    n = len(line)
    in_single = False
    in_double = False
    word_start = True
    while i < n:
        ch = line[i]
        if in_single:
            in_single = ch != "'"
            out.append(ch)
            i += 1
            continue
        if in_double:
            if ch == '\\' and i + 1 < n:
                nxt = line[i + 1]
                if nxt in _DQ_EXTRA_ESCAPES:
                    if nxt != '\n':
                        out.append(nxt)
                else:
                    out.append(ch + nxt)
                i += 2
                continue
            in_double = ch != '"'
            out.append(ch)
            i += 1
            continue
        if ch == '\\':
            # dangling escape at end of line is left for shlex to reject
            out.append(line[i:i + 2])
            word_start = False
            i += 2
            continue
        if ch in _WHITESPACE:
            word_start = True
        elif ch == '#' and word_start:
            break
        else:
            word_start = False
            if ch == "'":
                in_single = True
            elif ch == '"':
                in_double = True
        out.append(ch)
        i += 1
    return ''.join(out)


def tokenize(line: str) -> list[str]:
    """Split an input line into shell-like tokens.

    Rules (POSIX word splitting):
    - Unquoted whitespace separates tokens
    - Single quotes keep every enclosed character literally
    - Double quotes keep whitespace; backslash escapes \\, ", $, ` and newline
    - Outside quotes a backslash escapes the next character
    - A '#' that begins a word starts a comment; elsewhere it is literal

    Operators such as '>' are only seen as separate tokens when written as
    separate words. An empty or blank line yields an empty list.
    """
    lexer = shlex.shlex(_prepare_line(line), posix=True)
    lexer.commenters = ''
    lexer.whitespace_split = True
    try:
        tokens = list(lexer)
    except ValueError as e:
        # shlex reports unbalanced quotes / dangling escapes as ValueError
        raise MalformedInput(str(e)) from e
    logger.debug("tokens: %r", tokens)
    return tokens


def format_tokens(tokens: list[str]) -> str:
    """Render tokens back into a line that would tokenize the same way."""
    return shlex.join(tokens) if tokens else "<empty>"
