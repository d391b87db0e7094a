from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import yaml

from .data.materialize import ABORT, COPY_ERROR_POLICIES
from .sampling.reservoir import PAD, SHORT_STRATUM_POLICIES


@dataclass(frozen=True)
class SampleConfig:
    input_dir: Path
    output_dir: Path
    sample_size: int
    short_stratum: str = PAD
    on_copy_error: str = ABORT
    overwrite: bool = True
    seed: int | None = None
    workers: int = 1
    manifest_path: Path | None = None


def _require_mapping(data: object, config_path: Path) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"Config at '{config_path}' must be a YAML mapping.")
    return data


def _require_str(data: dict, key: str, config_path: Path) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config key '{key}' in '{config_path}' must be a non-empty string.")
    return value.strip()


def _optional_int(data: dict, key: str, config_path: Path) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Config key '{key}' in '{config_path}' must be an integer.")
    return value


def _optional_choice(
    data: dict, key: str, choices: tuple[str, ...], config_path: Path
) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or value.strip().lower() not in choices:
        raise ValueError(
            f"Config key '{key}' in '{config_path}' must be one of {'|'.join(choices)}."
        )
    return value.strip().lower()


def validate_config(cfg: SampleConfig, source: str = "command line") -> SampleConfig:
    if cfg.sample_size < 0:
        raise ValueError(f"sample_size from {source} must be >= 0, got {cfg.sample_size}.")
    if cfg.workers < 1:
        raise ValueError(f"workers from {source} must be >= 1, got {cfg.workers}.")
    if cfg.short_stratum not in SHORT_STRATUM_POLICIES:
        raise ValueError(
            f"short_stratum from {source} must be one of {'|'.join(SHORT_STRATUM_POLICIES)}."
        )
    if cfg.on_copy_error not in COPY_ERROR_POLICIES:
        raise ValueError(
            f"on_copy_error from {source} must be one of {'|'.join(COPY_ERROR_POLICIES)}."
        )
    return cfg


def load_config(config_path: Path) -> SampleConfig:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    data = _require_mapping(raw, config_path)
    input_dir = Path(_require_str(data, "input_dir", config_path))
    output_dir = Path(_require_str(data, "output_dir", config_path))

    sample_size = _optional_int(data, "sample_size", config_path)
    if sample_size is None:
        raise ValueError(f"Config key 'sample_size' in '{config_path}' must be an integer.")

    overwrite = data.get("overwrite", True)
    if not isinstance(overwrite, bool):
        raise ValueError(f"Config key 'overwrite' in '{config_path}' must be a boolean.")

    workers = _optional_int(data, "workers", config_path)
    manifest_raw = data.get("manifest")
    manifest_path = Path(_require_str(data, "manifest", config_path)) if manifest_raw else None

    cfg = SampleConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        sample_size=sample_size,
        short_stratum=_optional_choice(data, "short_stratum", SHORT_STRATUM_POLICIES, config_path)
        or PAD,
        on_copy_error=_optional_choice(data, "on_copy_error", COPY_ERROR_POLICIES, config_path)
        or ABORT,
        overwrite=overwrite,
        seed=_optional_int(data, "seed", config_path),
        workers=workers if workers is not None else 1,
        manifest_path=manifest_path,
    )
    return validate_config(cfg, source=f"'{config_path}'")


def build_config(
    config_path: Path | None = None,
    input_dir: Path | None = None,
    output_dir: Path | None = None,
    sample_size: int | None = None,
    short_stratum: str | None = None,
    on_copy_error: str | None = None,
    overwrite: bool | None = None,
    seed: int | None = None,
    workers: int | None = None,
    manifest_path: Path | None = None,
) -> SampleConfig:
    """Merge an optional YAML config with command line values; flags win."""
    if config_path is not None:
        base = load_config(config_path)
    else:
        missing = [
            flag
            for flag, value in (("--dir", input_dir), ("--out", output_dir), ("--num", sample_size))
            if value is None
        ]
        if missing:
            raise ValueError(f"Missing required option(s): {', '.join(missing)} (or pass --config).")
        base = SampleConfig(input_dir=input_dir, output_dir=output_dir, sample_size=sample_size)

    overrides = {
        "input_dir": input_dir,
        "output_dir": output_dir,
        "sample_size": sample_size,
        "short_stratum": short_stratum.lower() if short_stratum else None,
        "on_copy_error": on_copy_error.lower() if on_copy_error else None,
        "overwrite": overwrite,
        "seed": seed,
        "workers": workers,
        "manifest_path": manifest_path,
    }
    cfg = replace(base, **{k: v for k, v in overrides.items() if v is not None})
    return validate_config(cfg)
