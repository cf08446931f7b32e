"""Configuration loading utilities."""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import Version
from .paths import runtime_config_dir


class TokenConfig(BaseModel):
    default_version: Version = Field(default=Version.V4, description="Version used by keygen and the CLI")
    ttl_seconds: int = Field(default=600, gt=0, description="Lifetime of issued tokens")
    leeway_seconds: int = Field(default=0, ge=0, description="Clock skew tolerated on exp/nbf")
    include_key_id: bool = Field(default=False, description="Add the key id as footer kid")
    require_implicit_assertion: List[Version] = Field(
        default_factory=list,
        description="Versions for which an empty implicit assertion is rejected",
    )

    @field_validator("require_implicit_assertion")
    @classmethod
    def _dedupe(cls, value: List[Version]) -> List[Version]:
        return list(dict.fromkeys(value))

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)

    @property
    def leeway(self) -> timedelta:
        return timedelta(seconds=self.leeway_seconds)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    tokens: TokenConfig = Field(default_factory=TokenConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".paseto" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            try:
                return AppConfig.model_validate(data)
            except ValidationError as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return DEFAULT_CONFIG.model_copy(deep=True)


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "LoggingConfig",
    "TokenConfig",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
