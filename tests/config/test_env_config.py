from __future__ import annotations

import pytest

from mechdata.config import (
    MUL_BASE_URL,
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
    get_ingest_config,
    get_mul_config,
    require_env_vars,
)
from mechdata.config.env import env_flag, env_float, env_int, env_int_list


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("BLANK_VAR", "MISSING_VAR")


def test_numeric_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_INT", " 7 ")
    monkeypatch.setenv("SOME_FLOAT", "0.25")
    monkeypatch.setenv("SOME_LIST", "18, 19,,17")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert env_int("SOME_INT", 0) == 7
    assert env_float("SOME_FLOAT", 1.0) == 0.25
    assert env_int_list("SOME_LIST", ()) == (18, 19, 17)
    assert env_int("UNSET_VAR", 3) == 3
    assert env_int_list("UNSET_VAR", [1, 2]) == (1, 2)


def test_numeric_helpers_reject_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BAD_VAR", "lots")

    with pytest.raises(ConfigurationError, match="BAD_VAR"):
        env_int("BAD_VAR", 0)
    with pytest.raises(ConfigurationError, match="BAD_VAR"):
        env_float("BAD_VAR", 0.0)
    with pytest.raises(ConfigurationError, match="BAD_VAR"):
        env_int_list("BAD_VAR", ())


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_env_flag(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("FLAG_VAR", raw)

    assert env_flag("FLAG_VAR") is expected


def test_ingest_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MECHDATA_MAX_ERRORS", "25")
    monkeypatch.setenv("MECHDATA_DATASET_VERSION", "0.50.0")

    config = get_ingest_config()

    assert config.max_errors == 25
    assert config.dataset_version == "0.50.0"


def test_negative_max_errors_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MECHDATA_MAX_ERRORS", "-1")

    with pytest.raises(InvalidConfigurationValueError) as exc:
        get_ingest_config()

    assert exc.value.name == "MECHDATA_MAX_ERRORS"


def test_mul_config_defaults_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MECHDATA_MUL_BASE_URL",
        "MECHDATA_MUL_TYPES",
        "MECHDATA_MUL_DELAY_SECONDS",
        "MECHDATA_MUL_HTTP_CACHE",
    ):
        monkeypatch.delenv(name, raising=False)

    default = get_mul_config()

    assert default.base_url == MUL_BASE_URL
    assert default.unit_types == (18, 19, 17)
    assert default.delay_seconds == 1.0
    assert default.http_cache is False

    monkeypatch.setenv("MECHDATA_MUL_BASE_URL", "https://mul.test")
    monkeypatch.setenv("MECHDATA_MUL_TYPES", "18")
    monkeypatch.setenv("MECHDATA_MUL_DELAY_SECONDS", "0")
    monkeypatch.setenv("MECHDATA_MUL_HTTP_CACHE", "true")

    custom = get_mul_config()
    resilience = custom.resilience()

    assert custom.unit_types == (18,)
    assert resilience.base_url == "https://mul.test"
    assert resilience.cache is not None
    assert resilience.ratelimit is not None
    assert resilience.ratelimit.per_seconds == pytest.approx(0.5)
    assert resilience.default_headers is not None
    assert "User-Agent" in resilience.default_headers
