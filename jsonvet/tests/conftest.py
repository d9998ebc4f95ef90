from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jsonvet.constraints.registry import reset_constraint_registry  # noqa: E402
from jsonvet.validation import properties_repo  # noqa: E402


def _load_app():
    module = importlib.import_module("jsonvet.main")
    return module.app


@pytest.fixture()
def client() -> TestClient:
    app = _load_app()
    app.state.limiter.reset()
    return TestClient(app)


@pytest.fixture(autouse=True)
def clean_registries():
    """Every test starts from the built-in constraints and an empty properties repository."""
    reset_constraint_registry()
    properties_repo.reset()
    yield
    reset_constraint_registry()
    properties_repo.reset()
