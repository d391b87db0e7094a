from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import typer

from .config import SampleConfig
from .data.listing import iter_items, list_strata
from .data.materialize import copy_sampled, create_output_dirs
from .data.paths import map_path
from .errors import DirectoryReadError, MaterializeErrors
from .sampling.random_source import stratum_random_source
from .sampling.reservoir import filled_slots, reservoir_sample


@dataclass(frozen=True)
class StratumSample:
    stratum: Path
    seen: int
    slots: list[Path | None]

    @property
    def selected(self) -> list[Path]:
        return filled_slots(self.slots)


@dataclass
class SampleReport:
    input_dir: Path
    output_dir: Path
    samples: list[StratumSample] = field(default_factory=list)
    output_dirs: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)

    @property
    def strata(self) -> list[Path]:
        return [s.stratum for s in self.samples]


def _sample_stratum(stratum: Path, cfg: SampleConfig) -> StratumSample:
    slots, seen = reservoir_sample(
        iter_items(stratum),
        capacity=cfg.sample_size,
        random_source=stratum_random_source(cfg.seed, stratum.name),
        policy=cfg.short_stratum,
        stratum=stratum,
    )
    return StratumSample(stratum=stratum, seen=seen, slots=slots)


def _sample_all(strata: list[Path], cfg: SampleConfig) -> list[StratumSample]:
    if cfg.workers == 1 or len(strata) <= 1:
        return [_sample_stratum(stratum, cfg) for stratum in strata]
    # map() yields in submission order, so the report keeps enumeration order.
    with ThreadPoolExecutor(max_workers=cfg.workers) as pool:
        return list(pool.map(lambda stratum: _sample_stratum(stratum, cfg), strata))


def plan_sample(cfg: SampleConfig, quiet: bool = False) -> SampleReport:
    """Enumerate and sample every stratum without touching the output tree."""
    if not cfg.input_dir.is_dir():
        raise DirectoryReadError(
            cfg.input_dir, NotADirectoryError(f"Not a directory: {cfg.input_dir}")
        )

    strata = list_strata(cfg.input_dir)
    samples = _sample_all(strata, cfg)
    if not quiet:
        for s in samples:
            typer.echo(f"Sampled {len(s.selected)}/{s.seen} file(s) from '{s.stratum}'.")
    return SampleReport(input_dir=cfg.input_dir, output_dir=cfg.output_dir, samples=samples)


def _manifest(cfg: SampleConfig, report: SampleReport) -> dict[str, object]:
    now = datetime.now(UTC).isoformat()
    return {
        "input_dir": str(cfg.input_dir),
        "output_dir": str(cfg.output_dir),
        "sample_size": cfg.sample_size,
        "short_stratum": cfg.short_stratum,
        "on_copy_error": cfg.on_copy_error,
        "overwrite": cfg.overwrite,
        "seed": cfg.seed,
        "workers": cfg.workers,
        "strata": [
            {
                "stratum": str(s.stratum),
                "items_seen": s.seen,
                "items_selected": len(s.selected),
                "selected": [str(p) for p in s.selected],
            }
            for s in report.samples
        ],
        "files_copied": len(report.copied),
        "created_at_utc": now,
    }


def write_manifest(cfg: SampleConfig, report: SampleReport, manifest_path: Path) -> None:
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    with manifest_path.open("w", encoding="utf-8") as f:
        json.dump(_manifest(cfg, report), f, indent=2, ensure_ascii=False)
        f.write("\n")


def _materialize(cfg: SampleConfig, report: SampleReport, quiet: bool) -> None:
    # Every stratum gets its output directory before any file is copied.
    report.output_dirs, dir_failures = create_output_dirs(
        report.strata, cfg.input_dir, cfg.output_dir, on_error=cfg.on_copy_error
    )
    # Strata whose directory could not be created are not copied into.
    blocked = {failure.path for failure in dir_failures}
    to_copy: list[Path | None] = []
    for s in report.samples:
        if map_path(s.stratum, cfg.input_dir, cfg.output_dir) not in blocked:
            to_copy.extend(s.slots)

    try:
        report.copied = copy_sampled(
            to_copy,
            cfg.input_dir,
            cfg.output_dir,
            on_error=cfg.on_copy_error,
            overwrite=cfg.overwrite,
            quiet=quiet,
        )
    except MaterializeErrors as e:
        if dir_failures:
            raise MaterializeErrors([*dir_failures, *e.errors], e.copied) from e
        raise
    if dir_failures:
        raise MaterializeErrors(list(dir_failures), report.copied)


def run_sample(cfg: SampleConfig, quiet: bool = False) -> SampleReport:
    report = plan_sample(cfg, quiet=quiet)
    _materialize(cfg, report, quiet=quiet)

    if not quiet:
        typer.echo(
            f"Mirrored {len(report.output_dirs)} stratum directories and copied "
            f"{len(report.copied)} file(s) into '{cfg.output_dir}'."
        )

    if cfg.manifest_path is not None:
        write_manifest(cfg, report, cfg.manifest_path)
        if not quiet:
            typer.echo(f"Wrote manifest: {cfg.manifest_path}")
    return report
