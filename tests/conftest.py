from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.support.fakes import RecordingNotifier, ScriptedConfirm
from tests.support.http_stub import FakeApi

if TYPE_CHECKING:
    from pathlib import Path

_PORTFOLIO_ENV = (
    "PORTFOLIO_API_URL",
    "PORTFOLIO_API_TOKEN",
    "PORTFOLIO_ADMIN_EMAIL",
    "PORTFOLIO_ADMIN_PASSWORD",
    "PORTFOLIO_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _PORTFOLIO_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PORTFOLIO_CMS_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()
