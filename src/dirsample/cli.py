from pathlib import Path

import typer

app = typer.Typer(help="Stratified random sampling of a directory tree")


def _fail(message: object) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command("sample")
def sample_command(
    input_dir: Path | None = typer.Option(
        None, "--dir", "-d", help="Directory whose subdirectories are sampled"
    ),
    number: int | None = typer.Option(
        None, "--num", "-n", help="Maximum number of files to copy from each subdirectory"
    ),
    output_dir: Path | None = typer.Option(
        None, "--out", "-o", help="Where to build the output directory"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to YAML config (flags override its values)"
    ),
    short_stratum: str | None = typer.Option(
        None, "--short-stratum", help="pad|strict handling of subdirectories with < N files"
    ),
    on_copy_error: str | None = typer.Option(
        None,
        "--on-copy-error",
        help="abort|collect when an output directory or a file copy fails",
    ),
    overwrite: bool | None = typer.Option(
        None, "--overwrite/--no-overwrite", help="Replace files that already exist in the output"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Subdirectories sampled concurrently"
    ),
    manifest: Path | None = typer.Option(
        None, "--manifest", help="Write a JSON manifest of the sample to this path"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report errors"),
) -> None:
    from .config import build_config
    from .errors import SampleError
    from .pipeline import run_sample

    try:
        cfg = build_config(
            config_path=config,
            input_dir=input_dir,
            output_dir=output_dir,
            sample_size=number,
            short_stratum=short_stratum,
            on_copy_error=on_copy_error,
            overwrite=overwrite,
            seed=seed,
            workers=workers,
            manifest_path=manifest,
        )
        run_sample(cfg, quiet=quiet)
    except (SampleError, ValueError, FileNotFoundError) as e:
        _fail(e)


@app.command("plan")
def plan_command(
    input_dir: Path | None = typer.Option(
        None, "--dir", "-d", help="Directory whose subdirectories are sampled"
    ),
    number: int | None = typer.Option(
        None, "--num", "-n", help="Maximum number of files to select from each subdirectory"
    ),
    output_dir: Path | None = typer.Option(
        None, "--out", "-o", help="Output directory the files would be copied to"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to YAML config (flags override its values)"
    ),
    short_stratum: str | None = typer.Option(
        None, "--short-stratum", help="pad|strict handling of subdirectories with < N files"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible sampling"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Subdirectories sampled concurrently"
    ),
) -> None:
    from .config import build_config
    from .data.paths import map_path
    from .errors import SampleError
    from .pipeline import plan_sample

    try:
        cfg = build_config(
            config_path=config,
            input_dir=input_dir,
            output_dir=output_dir,
            sample_size=number,
            short_stratum=short_stratum,
            seed=seed,
            workers=workers,
        )
        report = plan_sample(cfg, quiet=True)
        for s in report.samples:
            typer.echo(f"{s.stratum} ({len(s.selected)}/{s.seen})")
            for item in s.selected:
                typer.echo(f"  {item} -> {map_path(item, cfg.input_dir, cfg.output_dir)}")
    except (SampleError, ValueError, FileNotFoundError) as e:
        _fail(e)


def main() -> None:
    app()
