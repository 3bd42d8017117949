import subprocess
import sys
from pathlib import Path

import pytest

# Ensure the repo root is on sys.path so tests can import config/modules.
ROOT = str(Path(__file__).resolve().parents[1])
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


class Recorder:
    """Stand-in for run_cmd: records argv and fails on configured prefixes."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = [list(f) for f in fail_on]

    def __call__(self, args, cwd=None, env=None):
        self.calls.append((list(args), cwd))
        for prefix in self.fail_on:
            if list(args[: len(prefix)]) == prefix:
                raise subprocess.CalledProcessError(1, args)

    def argvs(self):
        return [argv for argv, _ in self.calls]


@pytest.fixture
def recorder():
    return Recorder


@pytest.fixture(autouse=True)
def _stable_run_id(monkeypatch):
    monkeypatch.setenv("BENCHLOCAL_RID", "testrun0")
