"""Rebuild the sampled subset under the output root.

Copies are not transactional: when a run aborts on a failed copy, files
already copied stay where they are.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, Sequence

import typer

from ..errors import CopyError, DirectoryCreateError, MaterializeErrors
from .paths import map_path

ABORT = "abort"
COLLECT = "collect"
COPY_ERROR_POLICIES = (ABORT, COLLECT)


def _check_policy(on_error: str) -> None:
    if on_error not in COPY_ERROR_POLICIES:
        raise ValueError(f"Unknown copy error policy '{on_error}'; expected abort|collect.")


def create_output_dirs(
    strata: Sequence[Path],
    input_root: Path,
    output_root: Path,
    on_error: str = ABORT,
) -> tuple[list[Path], list[DirectoryCreateError]]:
    """Mirror every stratum under ``output_root``.

    Returns the directories that exist afterwards and, under ``"collect"``,
    the failures. Under ``"abort"`` the first failure is raised.
    """
    _check_policy(on_error)
    # Map everything first so a bad path aborts before anything is written.
    out_dirs = [map_path(stratum, input_root, output_root) for stratum in strata]

    created: list[Path] = []
    failures: list[DirectoryCreateError] = []
    for out_dir in out_dirs:
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = DirectoryCreateError(out_dir, e)
            if on_error == ABORT:
                raise error from e
            failures.append(error)
            continue
        created.append(out_dir)
    return created, failures


def _copy_one(source: Path, destination: Path, overwrite: bool) -> None:
    try:
        if not overwrite and destination.exists():
            raise FileExistsError(f"Destination exists and overwrite is disabled: {destination}")
        shutil.copy2(source, destination)
    except OSError as e:
        raise CopyError(source, destination, e) from e


def copy_sampled(
    sampled: Iterable[Path | None],
    input_root: Path,
    output_root: Path,
    on_error: str = ABORT,
    overwrite: bool = True,
    quiet: bool = True,
) -> list[Path]:
    """Copy every non-sentinel item to its mirrored path.

    With ``on_error="abort"`` the first failure is raised. With ``"collect"``
    every copy is attempted and the failures are raised together as
    ``MaterializeErrors`` at the end. Returns the copied destinations.
    """
    _check_policy(on_error)

    pairs = [
        (source, map_path(source, input_root, output_root))
        for source in sampled
        if source is not None
    ]

    copied: list[Path] = []
    failures: list[CopyError] = []
    for source, destination in pairs:
        try:
            _copy_one(source, destination, overwrite=overwrite)
        except CopyError as e:
            if on_error == ABORT:
                raise
            failures.append(e)
            continue
        copied.append(destination)
        if not quiet:
            typer.echo(f"Copied: {source} -> {destination}")

    if failures:
        raise MaterializeErrors(failures, copied)
    return copied
