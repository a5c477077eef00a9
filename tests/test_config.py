# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from poolcore.config import DEFAULT_CONFIG, U64_MAX, EngineConfig, load_config


def test_defaults() -> None:
    cfg = load_config(environ={})
    assert cfg == DEFAULT_CONFIG
    assert cfg.minimum_shares == 1_000
    assert cfg.default_ratio_tolerance_bps == 50
    assert cfg.stable_invariant_tolerance == 1
    assert cfg.max_newton_iterations == 255
    assert (cfg.min_amplification, cfg.max_amplification) == (1, 10_000)
    assert cfg.max_amount == U64_MAX


def test_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "poolcore.yaml"
    path.write_text("minimum_shares: 500\nmax_fee_bps: 300\n", encoding="utf-8")
    cfg = load_config(path, environ={})
    assert cfg.minimum_shares == 500
    assert cfg.max_fee_bps == 300
    assert cfg.max_newton_iterations == 255


def test_empty_yaml_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, environ={}) == DEFAULT_CONFIG


def test_unknown_yaml_key_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("minimum_share: 500\n", encoding="utf-8")
    with pytest.raises(ValueError, match="unknown config keys"):
        load_config(path, environ={})


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "poolcore.yaml"
    path.write_text("minimum_shares: 500\n", encoding="utf-8")
    cfg = load_config(path, environ={"POOLCORE_MINIMUM_SHARES": "2000", "POOLCORE_MAX_A_CHANGE": " 3 "})
    assert cfg.minimum_shares == 2_000
    assert cfg.max_a_change == 3


def test_malformed_environment_value() -> None:
    with pytest.raises(ValueError, match="POOLCORE_MAX_FEE_BPS"):
        load_config(environ={"POOLCORE_MAX_FEE_BPS": "ten"})


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(minimum_shares=0),
        dict(max_fee_bps=10_001),
        dict(min_amplification=10, max_amplification=5),
        dict(max_newton_iterations=0),
        dict(max_a_change=True),
    ],
)
def test_invalid_config(kwargs: dict) -> None:
    with pytest.raises((TypeError, ValueError)):
        EngineConfig(**kwargs)
