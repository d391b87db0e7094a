from __future__ import annotations

from pathlib import Path

from ..errors import PathMappingError


def map_path(path: Path, input_root: Path, output_root: Path) -> Path:
    """Rewrite the ``input_root`` prefix of ``path`` to ``output_root``."""
    try:
        suffix = path.relative_to(input_root)
    except ValueError as e:
        raise PathMappingError(path, input_root) from e
    return output_root / suffix

