"""Tests for configuration loading."""

from flowtrace.config import load_config
from flowtrace.sources import HttpHistorySource, get_history_source


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "flowtrace.yaml"
    config_path.write_text(
        """
engine:
  base_url: http://flowable.internal:9000
  username: admin
  timeout: 3.5
  endpoints:
    task_history: /history/{instance_id}
source:
  backend: inmemory
"""
    )
    monkeypatch.setenv("FLOWTRACE_CONFIG", str(config_path))
    monkeypatch.delenv("FLOWTRACE_ENGINE_URL", raising=False)

    config = load_config()
    assert config.engine.base_url == "http://flowable.internal:9000"
    assert config.engine.username == "admin"
    assert config.engine.timeout == 3.5
    assert config.engine.endpoints.task_history == "/history/{instance_id}"
    assert config.engine.endpoints.activities.startswith("/process-api/history")
    assert config.source.backend == "inmemory"


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("FLOWTRACE_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("FLOWTRACE_ENGINE_URL", raising=False)
    config = load_config()
    assert config.engine.base_url == "http://localhost:8080"
    assert config.source.backend == "http"


def test_env_overrides_engine_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("FLOWTRACE_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("FLOWTRACE_ENGINE_URL", "http://engine.example:8081")
    monkeypatch.setenv("FLOWTRACE_ENGINE_USER", "ops")
    monkeypatch.setenv("FLOWTRACE_ENGINE_PASSWORD", "s3cret")
    monkeypatch.delenv("FLOWTRACE_SOURCE", raising=False)

    config = load_config()
    assert config.engine.base_url == "http://engine.example:8081"
    assert (config.engine.username, config.engine.password) == ("ops", "s3cret")

    source = get_history_source(config=config)
    assert isinstance(source, HttpHistorySource)
    assert source.config.base_url == "http://engine.example:8081"
