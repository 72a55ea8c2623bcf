from __future__ import annotations

import importlib.util
from pathlib import Path

import uvicorn

SCRIPTS = Path(__file__).resolve().parent.parent / "scripts"


def _load(name: str):
    spec = importlib.util.spec_from_file_location(f"_script_{name}", SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_run_api_serves_app_factory(monkeypatch, capsys):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kw: calls.append((app, kw)))
    monkeypatch.setattr("sys.argv", ["run_api.py", "--host", "127.0.0.1", "--port", "9123", "--reload"])

    _load("run_api").main()

    [(app, kw)] = calls
    assert app == "gym_platform.api.server:create_app"
    assert kw == {"factory": True, "host": "127.0.0.1", "port": 9123, "reload": True}
    assert "Database:" in capsys.readouterr().out


def test_run_api_defaults_from_environment(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kw: calls.append(kw))
    monkeypatch.setattr("sys.argv", ["run_api.py"])
    monkeypatch.setenv("GYM_API_HOST", "10.0.0.5")
    monkeypatch.setenv("GYM_API_PORT", "8088")

    _load("run_api").main()

    assert calls[0]["host"] == "10.0.0.5"
    assert calls[0]["port"] == 8088
    assert calls[0]["reload"] is False
