from __future__ import annotations

import importlib
import sys

import pytest
from fastapi.middleware.cors import CORSMiddleware

# Only the env-driven modules are re-imported; the rest of jsonvet keeps its
# class identities for the other test modules.
_RELOADED = ("jsonvet.settings", "jsonvet.main")


@pytest.fixture()
def load_main():
    package = importlib.import_module("jsonvet")
    saved = {name: sys.modules[name] for name in _RELOADED if name in sys.modules}

    def _load():
        for name in _RELOADED:
            sys.modules.pop(name, None)
        return importlib.import_module("jsonvet.main")

    yield _load

    for name in _RELOADED:
        sys.modules.pop(name, None)
    for name, module in saved.items():
        sys.modules[name] = module
        setattr(package, name.rpartition(".")[2], module)


def _cors_origins(main) -> list:
    cors_layers = [m for m in main.app.user_middleware if m.cls is CORSMiddleware]
    assert cors_layers, "CORS middleware should be registered"
    return cors_layers[0].kwargs["allow_origins"]


def test_production_cors_uses_allowlist(monkeypatch, load_main):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://app.example.com,https://console.example.com")

    main = load_main()

    assert _cors_origins(main) == [
        "https://app.example.com",
        "https://console.example.com",
    ]


def test_production_without_allowlist_fails(monkeypatch, load_main):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    with pytest.raises(RuntimeError, match="ALLOWED_ORIGINS"):
        load_main()


def test_development_cors_allows_any_origin(monkeypatch, load_main):
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    main = load_main()

    assert _cors_origins(main) == ["*"]


def test_reload_keeps_library_classes(load_main):
    from jsonvet.constraints.base import Constraint

    load_main()

    assert importlib.import_module("jsonvet.constraints.base").Constraint is Constraint
