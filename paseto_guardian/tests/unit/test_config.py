from pathlib import Path

import pytest
import yaml

from paseto_guardian.config import AppConfig, config_search_paths, dump_default_config, load_config
from paseto_guardian.models import Version


def test_defaults_when_no_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("paseto_guardian.config.runtime_config_dir", lambda: tmp_path / "user")
    config = load_config()
    assert config == AppConfig()
    assert config.tokens.default_version is Version.V4
    assert config.tokens.ttl.total_seconds() == 600


def test_explicit_path_wins(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "tokens": {"default_version": "v3", "leeway_seconds": 5, "require_implicit_assertion": ["v4"]},
                "logging": {"level": "debug"},
            }
        ),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.tokens.default_version is Version.V3
    assert config.tokens.leeway.total_seconds() == 5
    assert config.tokens.require_implicit_assertion == [Version.V4]
    assert config.logging.normalized_level() == "DEBUG"


def test_working_directory_config_is_found(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    target = tmp_path / ".paseto" / "config.yaml"
    target.parent.mkdir()
    target.write_text("tokens:\n  include_key_id: true\n", encoding="utf-8")
    assert load_config().tokens.include_key_id is True
    assert next(iter(config_search_paths())) == target


@pytest.mark.parametrize(
    "content",
    [
        "tokens:\n  default_version: v9\n",
        "tokens:\n  ttl_seconds: 0\n",
        "tokens:\n  leeway_seconds: -1\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_dump_default_config_round_trips(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "config.yaml"
    dump_default_config(target)
    assert load_config(target) == AppConfig()
