"""Output channels shared by builtins and external commands.

A command never writes to sys.stdout directly. It is handed a ChannelPair
whose stdout/stderr entries are sinks; a sink is either the console or a
file opened by a redirection. Every write is flushed immediately so a
redirected file is complete as soon as the command returns.
"""
from __future__ import annotations

import sys
from typing import Any, Optional, TextIO


class OutputSink:
    """Minimal writable target: write(text), flush(), close()."""

    def write(self, data: str) -> int:
        raise NotImplementedError

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def writeln(self, line: str) -> int:
        return self.write(line + "\n")


class ConsoleSink(OutputSink):
    """Writes to a console stream.

    With no explicit stream the sink resolves sys.stdout / sys.stderr at
    write time, which keeps it working under pytest's capture and
    contextlib.redirect_stdout. The console is never closed by the sink.
    """

    def __init__(self, stream: Optional[TextIO] = None, *, name: str = "stdout") -> None:
        self._stream = stream
        self.name = name

    @property
    def stream(self) -> TextIO:
        if self._stream is not None:
            return self._stream
        return sys.stderr if self.name == "stderr" else sys.stdout

    def write(self, data: str) -> int:
        stream = self.stream
        stream.write(data)
        stream.flush()
        return len(data)

    def flush(self) -> None:
        self.stream.flush()

    def __repr__(self) -> str:
        return f"ConsoleSink({self.name!r})"


class FileSink(OutputSink):
    """Owns a file opened for a redirection (truncate or append)."""

    def __init__(self, path: str, *, append: bool = False, encoding: str = "utf-8") -> None:
        self.path = path
        self.append = append
        mode = "a" if append else "w"
        # newline='' so child output is stored byte-for-byte as decoded
        self._file = open(path, mode, encoding=encoding, errors="replace", newline="")

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, data: str) -> int:
        n = self._file.write(data)
        self._file.flush()
        return n

    def flush(self) -> None:
        if not self._file.closed:
            self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __repr__(self) -> str:
        return f"FileSink({self.path!r}, append={self.append})"


class ChannelPair:
    """The stdout/stderr sinks for one command line.

    Lifecycle:
    - Created fresh for each line with console sinks.
    - The redirection parser may swap one entry for a FileSink it opened.
    - close() releases owned file sinks; console sinks are left alone.
    """

    def __init__(self, stdout: Optional[OutputSink] = None, stderr: Optional[OutputSink] = None) -> None:
        self.stdout: OutputSink = stdout if stdout is not None else ConsoleSink(name="stdout")
        self.stderr: OutputSink = stderr if stderr is not None else ConsoleSink(name="stderr")

    @classmethod
    def console(cls, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> "ChannelPair":
        return cls(ConsoleSink(stdout, name="stdout"), ConsoleSink(stderr, name="stderr"))

    def replace(self, stream: str, sink: OutputSink) -> None:
        if stream == "stderr":
            self.stderr = sink
        elif stream == "stdout":
            self.stdout = sink
        else:
            raise ValueError(f"unknown stream: {stream}")

    def close(self) -> None:
        for sink in (self.stdout, self.stderr):
            sink.close()

    def __enter__(self) -> "ChannelPair":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
