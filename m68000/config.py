from __future__ import annotations

from dataclasses import dataclass
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


def _env_int(name: str, default: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip(), 0)


@dataclass(frozen=True)
class DasmConfig:
    little_endian: bool
    trace: bool
    base_address: int


def load_dasm_config() -> DasmConfig:
    return DasmConfig(
        little_endian=_env_flag("M68K_LITTLE_ENDIAN", default=False),
        trace=_env_flag("M68K_TRACE", default=False),
        base_address=_env_int("M68K_BASE", default=0),
    )


__all__ = ["DasmConfig", "load_dasm_config"]
