"""Root conftest — isolates every test from the caller's environment.

load_settings() reads .env from the cwd and MICROSCAFFOLD_* variables, so
each test runs in its own tmp directory with those variables cleared.
"""

import os
from pathlib import Path

import pytest

_ENV_VARS = ("MICROSCAFFOLD_WORKSPACE", "MICROSCAFFOLD_REGISTRY")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv() writes os.environ directly, outside monkeypatch's undo log
    for var in _ENV_VARS:
        os.environ.pop(var, None)
