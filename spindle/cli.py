"""Command-line interface for Spindle.

This module defines the CLI commands using the Click framework.

Commands:
- build: Transform every source file into the destination tree.
- watch: Build, then rebuild each file as it changes.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .config import CONFIG_FILENAME, Configuration, InvalidConfigurationError, load_config


def _config_options(func):
    func = click.option("--verbose", "-v", is_flag=True, help="Report sizes and skipped files")(func)
    func = click.option(
        "--destination", type=click.Path(file_okay=False), help="Override destination directory"
    )(func)
    func = click.option(
        "--source", type=click.Path(file_okay=False), help="Override source directory"
    )(func)
    func = click.option(
        "--config",
        "config_file",
        type=click.Path(dir_okay=False),
        default=CONFIG_FILENAME,
        show_default=True,
        help="Configuration file",
    )(func)
    return func


def _load(config_file: str, source: str | None, destination: str | None) -> Configuration:
    path = Path(config_file)
    base_path = path.parent.resolve() if path.parent != Path() else Path.cwd()
    try:
        return load_config(
            base_path,
            path.name,
            overrides={"source": source, "destination": destination},
        )
    except InvalidConfigurationError as exc:
        raise click.ClickException(str(exc)) from None


@click.group()
@click.version_option(version=__version__, prog_name="spindle")
def cli():
    """Spindle static site build pipeline."""


@cli.command()
@_config_options
def build(config_file: str, source: str | None, destination: str | None, verbose: bool):
    """Transform every source file into the destination directory."""
    config = _load(config_file, source, destination)
    _build(config, verbose)


@cli.command()
@_config_options
def watch(config_file: str, source: str | None, destination: str | None, verbose: bool):
    """Build once, then rebuild files as they change."""
    config = _load(config_file, source, destination)
    _build(config, verbose)

    from .pipeline import Pipeline
    from .watcher import SourceWatcher

    SourceWatcher(config, Pipeline.from_config(config, verbose), verbose).run_forever()


def _build(config: Configuration, verbose: bool) -> None:
    from .build import build_site
    from .pipeline import PipelineError

    try:
        result = build_site(config, verbose=verbose)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    except PipelineError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {exc.source_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.written)} files into {result.destination}")


def main():
    """Entry point for the CLI application."""
    cli()
