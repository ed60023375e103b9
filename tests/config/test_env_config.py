from __future__ import annotations

import pytest

from portfolio_cms.config import (
    MissingConfigurationError,
    optional_env_var,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BLANK_VAR", "  ")
    monkeypatch.setenv("PADDED_VAR", " value ")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert optional_env_var("BLANK_VAR") is None
    assert optional_env_var("UNSET_VAR") is None
    assert optional_env_var("PADDED_VAR") == "value"


def test_missing_configuration_keeps_the_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("PRESENT", "yes")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["PRESENT", "MISSING_B"])

    assert exc.value.names == ("MISSING_B",)
