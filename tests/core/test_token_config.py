"""Tests for feeshare/core/config.py: YAML loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from feeshare.core import FeeShareToken, load_config
from feeshare.core.config import SINK_ACCOUNT, config_from_dict

SAMPLE = Path(__file__).resolve().parents[2] / "examples_config" / "token.yaml"
NULL_QUOTED = '"0x0000000000000000000000000000000000000000"'

BASE = """
total_supply: 1000000
initial_holder: "0x1111111111111111111111111111111111111111"
engine_account: "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
pair: {address: "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa", quote_token: "0xbb"}
pools: {lp: "0xc1", burn: "0xc2", fund: "0xf0"}
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "token.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_sample_config_loads() -> None:
    cfg = load_config(SAMPLE)
    assert cfg.symbol == "FSH"
    assert cfg.rates.total == 60
    assert cfg.costs.payout_cost == 2
    assert cfg.sink == SINK_ACCOUNT
    assert [a.cycle_days for a in cfg.locks] == [365, 180]
    assert cfg.is_exempt("0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee")


def test_sample_config_builds_a_token() -> None:
    cfg = load_config(SAMPLE)
    token = FeeShareToken(cfg)
    assert token.balance_of(cfg.engine_account) == 54_500_000
    assert token.ledger.total_supply == cfg.total_supply
    assert token.vesting.start_time == 1_700_000_000


def test_minimal_config_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, BASE))
    assert cfg.rates.total == 0
    assert cfg.distributor_budget == 50
    assert cfg.vest_start_time is None
    assert cfg.locks == ()


def test_unquoted_account_is_rejected(tmp_path: Path) -> None:
    text = BASE.replace('"0x1111111111111111111111111111111111111111"', "0x1111111111111111111111111111111111111111")
    with pytest.raises(TypeError):
        load_config(_write(tmp_path, text))


def test_unquoted_fee_exempt_entry_is_rejected(tmp_path: Path) -> None:
    text = BASE + "fee_exempt:\n  - \"0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee\"\n  - 0x1111111111111111111111111111111111111111\n"
    with pytest.raises(TypeError):
        load_config(_write(tmp_path, text))


def test_null_sink_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, BASE + f"sink: {NULL_QUOTED}\n"))


def test_null_quote_token_is_rejected(tmp_path: Path) -> None:
    text = BASE.replace('quote_token: "0xbb"', f"quote_token: {NULL_QUOTED}")
    assert text != BASE
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, text))


def test_missing_section_is_rejected() -> None:
    with pytest.raises(TypeError):
        config_from_dict({"engine_account": "0xee", "initial_holder": "0x11"})


def test_locks_above_supply_are_rejected(tmp_path: Path) -> None:
    text = BASE + 'locks:\n  - {beneficiary: "0xd1", total: 2000000, cycle_days: 10}\n'
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, text))


def test_bad_rates_are_rejected(tmp_path: Path) -> None:
    text = BASE + "fees: {lp_rate: 900, burn_rate: 200}\n"
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, text))


def test_non_mapping_document_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        load_config(_write(tmp_path, "- just\n- a list\n"))
