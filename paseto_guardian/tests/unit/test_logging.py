import json
import logging

import pytest
import structlog

from paseto_guardian.logging import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def test_records_are_json_with_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("info")
    structlog.get_logger("paseto_guardian.test").info("token.decode.failed", reason="AuthenticationFailure")
    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["msg"] == "token.decode.failed"
    assert record["level"] == "info"
    assert record["component"] == "paseto_guardian.test"
    assert record["reason"] == "AuthenticationFailure"
    assert "ts" in record


def test_environment_overrides_level(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PG_LOG_LEVEL", "error")
    configure_logging("debug")
    logger = structlog.get_logger("paseto_guardian.test")
    logger.info("hidden")
    logger.error("shown")
    lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    assert [line["msg"] for line in lines] == ["shown"]


def test_sensitive_fields_are_masked(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("debug")
    structlog.get_logger("paseto_guardian.test").debug(
        "token.encoded", key="k4.local.AAAA", token="v4.local.xyz", version="v4"
    )
    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["key"] == "<redacted>"
    assert record["token"] == "<redacted>"
    assert record["version"] == "v4"


def test_unknown_level_falls_back_to_info(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("chatty")
    logger = structlog.get_logger("paseto_guardian.test")
    logger.debug("hidden")
    logger.info("shown")
    lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    assert [line["msg"] for line in lines] == ["shown"]
