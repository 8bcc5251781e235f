"""Configuration loading for procmon."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(slots=True)
class SamplerConfig:
    """CPU utilization sampler settings."""

    samples: int = 10
    interval_ms: int = 100


@dataclass(slots=True)
class MonitorConfig:
    """Background monitor settings."""

    poll_rate: float = 2.0


@dataclass(slots=True)
class ProcmonConfig:
    """Top-level procmon configuration."""

    proc_root: str = "/proc"
    os_release_path: str = "/etc/os-release"
    passwd_path: str = "/etc/passwd"
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)


_ENV_MAP: dict[str, tuple[tuple[str, ...], type]] = {
    "PROCMON_PROC_ROOT": (("proc_root",), str),
    "PROCMON_OS_RELEASE": (("os_release_path",), str),
    "PROCMON_PASSWD": (("passwd_path",), str),
    "PROCMON_SAMPLES": (("sampler", "samples"), int),
    "PROCMON_SAMPLE_INTERVAL_MS": (("sampler", "interval_ms"), int),
    "PROCMON_POLL_RATE": (("monitor", "poll_rate"), float),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using the PROCMON_ prefix."""
    for env_key, (path, cast) in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        obj = data
        for part in path[:-1]:
            nested = obj.get(part)
            if not isinstance(nested, dict):
                nested = obj[part] = {}
            obj = nested
        obj[path[-1]] = cast(value)
    return data


def _pick(cls: type, data: Any) -> dict[str, Any]:
    """Keep only the keys of ``data`` that are fields of dataclass ``cls``."""
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if k in cls.__dataclass_fields__}


def _dict_to_config(data: dict[str, Any]) -> ProcmonConfig:
    """Convert a raw dictionary to a ProcmonConfig dataclass."""
    top = {
        k: str(v)
        for k, v in _pick(ProcmonConfig, data).items()
        if k not in ("sampler", "monitor")
    }
    return ProcmonConfig(
        **top,
        sampler=SamplerConfig(**_pick(SamplerConfig, data.get("sampler"))),
        monitor=MonitorConfig(**_pick(MonitorConfig, data.get("monitor"))),
    )


def load_config(path: str | Path | None = None) -> ProcmonConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``procmon.yaml`` in the current directory if *path* is None.
    A missing file, or one that does not hold a mapping, yields defaults.
    """
    data: dict[str, Any] = {}
    path = Path("procmon.yaml") if path is None else Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
