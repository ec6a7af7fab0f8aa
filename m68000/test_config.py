from __future__ import annotations

import pytest

from .config import DasmConfig, load_dasm_config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("M68K_LITTLE_ENDIAN", "M68K_TRACE", "M68K_BASE"):
        monkeypatch.delenv(name, raising=False)
    assert load_dasm_config() == DasmConfig(
        little_endian=False, trace=False, base_address=0
    )


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("yes", True), ("0", False), ("false", False), ("OFF", False), ("", False)],
)
def test_env_flags(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("M68K_LITTLE_ENDIAN", raw)
    monkeypatch.setenv("M68K_TRACE", raw)
    config = load_dasm_config()
    assert config.little_endian is expected
    assert config.trace is expected


def test_base_address_accepts_hex(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("M68K_BASE", "0xFC0000")
    assert load_dasm_config().base_address == 0xFC0000
    monkeypatch.setenv("M68K_BASE", "  ")
    assert load_dasm_config().base_address == 0


def test_bad_base_address(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("M68K_BASE", "rom")
    with pytest.raises(ValueError):
        load_dasm_config()
