"""CLI commands powered by Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from drainer.services.errors import DrainerError
from drainer.services.grouper import FileGrouper
from drainer.services.orchestrator import Drainer, render_summary
from drainer.services.paths import CONFIG_FILE
from drainer.services.settings import DrainConfig, SettingsManager, load_config

app = typer.Typer(help="Drain directory trees into a destination root and prune the leftovers.")


def _load_settings(config: Path | None) -> DrainConfig:
    if config is None:
        return SettingsManager().config
    try:
        return load_config(config)
    except DrainerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)


def _progress(processed: int, total: int) -> None:
    typer.echo(f"Processed {processed}/{total}")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details for every file."),
) -> None:
    """Shared options for every command."""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@app.command()
def drain(
    source: Path = typer.Argument(..., help="Folder whose files should be relocated."),
    destination: Optional[Path] = typer.Argument(
        None, help="Destination root. Defaults to the source folder itself."
    ),
    delete_empty_dirs: Optional[bool] = typer.Option(
        None,
        "--delete-empty-dirs/--keep-empty-dirs",
        help="Remove the emptied subfolders once every file has been moved.",
    ),
    recursive: Optional[bool] = typer.Option(
        None, "--recursive/--no-recursive", help="Descend into subfolders of the source."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Relocation worker pool size."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Read defaults from this JSON file."),
    progress: bool = typer.Option(False, help="Print a line after each file settles."),
) -> None:
    """Move every file under SOURCE to the same relative path under DESTINATION."""

    settings = _load_settings(config)
    try:
        drainer = Drainer(
            source,
            destination,
            delete_empty_dirs=settings.delete_empty_dirs if delete_empty_dirs is None else delete_empty_dirs,
            recursive=settings.recursive if recursive is None else recursive,
            max_workers=workers or settings.max_workers,
        )
        report = drainer.run(progress_callback=_progress if progress else None)
    except DrainerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(render_summary(report))
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def group(
    source: Path = typer.Argument(..., help="Folder whose files should be grouped."),
    size: int = typer.Option(..., "--size", "-n", min=1, help="Maximum number of files per group folder."),
    by_date: bool = typer.Option(False, "--by-date", help="Order files by modification time instead of name."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Relocation worker pool size."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Read defaults from this JSON file."),
) -> None:
    """Split the files directly inside SOURCE into Group_1, Group_2, ... folders."""

    settings = _load_settings(config)
    grouper = FileGrouper(size, sort_by_date=by_date, max_workers=workers or settings.max_workers)
    try:
        tasks = grouper.group(source)
    except DrainerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    failures = [task for task in tasks if not task.succeeded]
    typer.echo(f"Grouped {len(tasks) - len(failures)} file(s).")
    if failures:
        typer.echo("Some operations failed:")
        for task in failures:
            typer.echo(f"- {task.source}: {task.reason}")
        raise typer.Exit(code=1)


@app.command()
def init_config(
    output: Optional[Path] = typer.Option(None, help="Where to write the default config."),
    force: bool = typer.Option(False, help="Overwrite an existing file."),
) -> None:
    """Write the default configuration file in JSON format."""

    target = output or CONFIG_FILE
    if target.exists() and not force:
        typer.echo(f"{target} already exists; pass --force to overwrite.", err=True)
        raise typer.Exit(code=1)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DrainConfig().model_dump_json(indent=2))
    typer.echo(f"Wrote config to {target}")


@app.command()
def configure(
    delete_empty_dirs: Optional[bool] = typer.Option(None, "--delete-empty-dirs/--keep-empty-dirs"),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--no-recursive"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to update."),
) -> None:
    """Persist new defaults and print the resulting configuration."""

    manager = SettingsManager(config)
    try:
        manager.update(
            delete_empty_dirs=delete_empty_dirs,
            recursive=recursive,
            max_workers=workers,
            log_level=log_level,
        )
    except DrainerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    typer.echo(manager.config.model_dump_json(indent=2))
