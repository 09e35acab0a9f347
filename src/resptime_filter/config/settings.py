"""Settings model — pydantic-settings with env var support."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

ENV_PREFIX = "RESPTIME_"


class Settings(BaseSettings):
    """Filter settings.

    Use ``ConfigLoader.load_settings()`` to build with YAML + env var layering.
    Direct construction (e.g. in tests) skips YAML loading.
    """

    hosts: list[str] = ["http://localhost:9200"]
    index: str | None = None
    user: str | None = None
    password: str | None = None
    timeout: float = 10.0

    query: str = "*"
    # Comma-delimited <field>:<direction> pairs passed through to the store.
    sort: str = "@timestamp:desc"
    source_filter: str | None = None
    percentage_limit: float = Field(default=5, gt=0, le=100)
    best_response_time_field_name: str = "best_response_time"
    worst_response_time_field_name: str = "worst_response_time"
    latency_field: str = "latency.response_transmitted"
    result_size: int = Field(default=10000, gt=0)

    tags: list[str] = []
    add_tag: list[str] = []
    add_field: dict[str, str] = {}
    remove_field: list[str] = []
    remove_tag: list[str] = []

    log_level: str = "INFO"

    model_config = {"env_prefix": ENV_PREFIX}
