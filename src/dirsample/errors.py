from __future__ import annotations

from pathlib import Path


class SampleError(Exception):
    """Base class for every failure the sampler reports to the user."""


class DirectoryReadError(SampleError):
    def __init__(self, path: Path, cause: OSError | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not read directory '{path}'{detail}")


class InsufficientItemsError(SampleError):
    def __init__(self, stratum: Path | None, found: int, required: int) -> None:
        self.stratum = stratum
        self.found = found
        self.required = required
        where = f"'{stratum}'" if stratum is not None else "stream"
        super().__init__(
            f"Stratum {where} has {found} file(s); at least {required} required "
            "(use --short-stratum pad to keep short strata)."
        )


class PathMappingError(SampleError):
    def __init__(self, path: Path, root: Path) -> None:
        self.path = path
        self.root = root
        super().__init__(f"Path '{path}' does not lie under root '{root}'.")


class DirectoryCreateError(SampleError):
    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not create directory '{path}': {cause}")


class CopyError(SampleError):
    def __init__(self, source: Path, destination: Path, cause: OSError) -> None:
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"Could not copy '{source}' -> '{destination}': {cause}")


class MaterializeErrors(SampleError):
    """Raised once at the end of a run that collected output failures."""

    def __init__(
        self,
        errors: list[DirectoryCreateError | CopyError],
        copied: list[Path] | None = None,
    ) -> None:
        self.errors = errors
        self.copied = copied or []
        lines = "\n".join(f"  {e}" for e in errors)
        super().__init__(f"{len(errors)} output operation(s) failed:\n{lines}")
