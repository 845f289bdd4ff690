from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel


class EndpointConfig(BaseModel):
    """URL templates for the engine REST API, relative to ``base_url``."""

    activities: str = (
        "/process-api/history/historic-activity-instances"
        "?processInstanceId={instance_id}&size=10000"
    )
    task_history: str = "/api/workflow/process/{instance_id}/history"
    definition_xml: str = (
        "/process-api/repository/process-definitions/{definition_id}/resourcedata"
    )
    definition_activities: str = (
        "/process-api/history/historic-activity-instances"
        "?processDefinitionId={definition_id}&size=10000"
    )


class EngineConfig(BaseModel):
    """Connection settings for the workflow engine API."""

    base_url: str = "http://localhost:8080"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 10.0
    max_retries: int = 2
    retry_backoff: float = 0.5
    endpoints: EndpointConfig = EndpointConfig()


class SourceConfig(BaseModel):
    """History source selection."""

    backend: Literal["http", "inmemory"] = "http"


class FlowtraceConfig(BaseModel):
    """Top-level configuration model."""

    engine: EngineConfig = EngineConfig()
    source: SourceConfig = SourceConfig()


def load_config(path: Optional[str] = None) -> FlowtraceConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to FLOWTRACE_CONFIG env
            variable or 'flowtrace.yaml' in the current directory.
    """

    config_path = path or os.getenv("FLOWTRACE_CONFIG", "flowtrace.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = FlowtraceConfig(**data)
    else:
        config = FlowtraceConfig()

    env_url = os.getenv("FLOWTRACE_ENGINE_URL")
    if env_url:
        config.engine.base_url = env_url
    env_user = os.getenv("FLOWTRACE_ENGINE_USER")
    if env_user:
        config.engine.username = env_user
    env_password = os.getenv("FLOWTRACE_ENGINE_PASSWORD")
    if env_password:
        config.engine.password = env_password
    return config
