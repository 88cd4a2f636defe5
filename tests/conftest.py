"""Shared fixtures for getcli tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from getcli.config import clear_config_instance


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests away from the user's config, sessions and GET_* variables."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("GET_CONFIG_DIR", str(tmp_path / "config"))
    for name in ("GET_FALLBACK_HOSTNAME", "GET_HTTP_HOSTNAMES", "GET_LOG_LEVEL", "GET_TIMEOUT", "GET_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)

    clear_config_instance()
    yield
    clear_config_instance()
