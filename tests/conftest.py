import os
import sys
from pathlib import Path

import pytest

# Ensure we can import modules from src/ before test modules are collected
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    safe_env = {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "HOME": str(home),
        "LANG": os.environ.get("LANG", "C"),
        "LC_ALL": os.environ.get("LC_ALL", "C"),
        "TERM": os.environ.get("TERM", "dumb"),
    }
    monkeypatch.setenv("PATH", safe_env["PATH"])
    monkeypatch.setenv("HOME", safe_env["HOME"])
    return tmp_path, safe_env


@pytest.fixture()
def session(sandbox):
    """Session with an in-memory working directory rooted at the sandbox."""
    from ops import ShellSession, VirtualWorkingDirectory
    tmp_path, safe_env = sandbox
    return ShellSession(cwd=VirtualWorkingDirectory(str(tmp_path)), env=safe_env)


@pytest.fixture()
def process_session(sandbox):
    """Session bound to the real process working directory."""
    from ops import ShellSession
    tmp_path, safe_env = sandbox
    return ShellSession(env=safe_env)


@pytest.fixture()
def bin_dir(tmp_path):
    """A private directory for fake executables placed on a search path."""
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture()
def make_script(bin_dir):
    """Write a /bin/sh script into bin_dir and return its path."""
    def _make(name: str, body: str, executable: bool = True) -> Path:
        script = bin_dir / name
        script.write_text("#!/bin/sh\n" + body)
        script.chmod(0o755 if executable else 0o644)
        return script
    return _make
