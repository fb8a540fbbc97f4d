from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from hook_scheduler.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.store_path == Path("jobs.json")
    assert settings.port == 3000
    assert settings.dispatch_timeout_seconds == 10.0
    assert settings.tz == ZoneInfo("UTC")
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOOK_SCHEDULER_STORE_PATH", str(tmp_path / "store.json"))
    monkeypatch.setenv("HOOK_SCHEDULER_PORT", "8080")
    monkeypatch.setenv("HOOK_SCHEDULER_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("HOOK_SCHEDULER_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.store_path == tmp_path / "store.json"
    assert settings.port == 8080
    assert settings.tz == ZoneInfo("Europe/Berlin")
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("overrides", [
    {"timezone": "Mars/Olympus_Mons"},
    {"log_level": "LOUD"},
    {"dispatch_timeout_seconds": 0},
    {"firing_history_limit": 0},
])
def test_rejects_invalid_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
