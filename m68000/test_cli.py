from __future__ import annotations

import pytest

from .cli import build_parser, main


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "rom.bin"
    path.write_bytes(bytes.fromhex("4E71303C0010F0004E75"))
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("M68K_LITTLE_ENDIAN", "M68K_TRACE", "M68K_BASE"):
        monkeypatch.delenv(name, raising=False)


def test_parser_accepts_hex_addresses() -> None:
    args = build_parser().parse_args(["rom.bin", "--base", "0xFC0000", "--count", "3"])
    assert args.base == 0xFC0000
    assert args.count == 3
    assert args.bytes is True
    assert args.little_endian is None


def test_main_prints_listing(image, capsys) -> None:
    assert main([str(image)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "000000  4E71                      NOP",
        "000002  303C 0010                 MOVE.W #16,D0",
        "000006  F000                      DC.W $F000",
        "000008  4E75                      RTS",
    ]


def test_main_base_and_range(image, capsys) -> None:
    assert main([str(image), "--base", "0x400", "--start", "0x402", "--count", "1", "--no-bytes"]) == 0
    assert capsys.readouterr().out.splitlines() == ["000402  MOVE.W #16,D0"]


def test_base_from_environment(image, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("M68K_BASE", "0x2000")
    main([str(image), "--no-bytes", "--count", "1"])
    assert capsys.readouterr().out.splitlines() == ["002000  NOP"]


def test_little_endian_image(tmp_path, capsys) -> None:
    path = tmp_path / "swapped.bin"
    path.write_bytes(bytes.fromhex("714E754E"))
    main([str(path), "--little-endian", "--no-bytes"])
    assert capsys.readouterr().out.splitlines() == ["000000  NOP", "000002  RTS"]


def test_missing_image(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.bin")])
    assert excinfo.value.code == 2


def test_start_below_base(image, capsys) -> None:
    assert main([str(image), "--base", "0x1000", "--start", "0", "--count", "1", "--no-bytes"]) == 0
    assert capsys.readouterr().out.splitlines() == ["001000  NOP"]
