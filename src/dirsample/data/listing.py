from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from ..errors import DirectoryReadError


def _iter_entries(directory: Path) -> Iterator[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            yield from it
    except OSError as e:
        raise DirectoryReadError(directory, e) from e


def list_strata(root: Path) -> list[Path]:
    """Immediate subdirectories of ``root``, in filesystem order."""
    strata: list[Path] = []
    for entry in _iter_entries(root):
        # An entry removed after listing reports False here and is skipped.
        try:
            is_dir = entry.is_dir()
        except OSError as e:
            raise DirectoryReadError(Path(entry.path), e) from e
        if is_dir:
            strata.append(Path(entry.path))
    return strata


def iter_items(stratum: Path) -> Iterator[Path]:
    """Lazily yield the regular files directly inside ``stratum``."""
    for entry in _iter_entries(stratum):
        try:
            # is_file() follows symlinks; a link to a directory is never a file.
            is_file = entry.is_file()
        except OSError as e:
            raise DirectoryReadError(Path(entry.path), e) from e
        if is_file:
            yield Path(entry.path)
