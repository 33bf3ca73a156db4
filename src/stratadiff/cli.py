"""stratadiff CLI: Typer application with diff, ini and init commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from stratadiff import __version__

app = typer.Typer(
    name="stratadiff",
    help="Show where and why two artifacts differ, down through nested archives.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    """Route library debug records through Rich on stderr."""
    if not debug:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    left: Path = typer.Argument(..., help="First file"),
    right: Path = typer.Argument(..., help="Second file"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: text | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", "-d", min=0, help="Stop expanding archives N levels down (0 = unlimited)"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .stratadiff.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Compare two files. Exit 0 if identical, 1 if they differ, 2 on error."""
    from stratadiff.config.loader import ConfigError, load_config
    from stratadiff.config.schema import OUTPUT_FORMATS
    from stratadiff.engine import DiffError, DiffOptions, File, NoDiff, diff as run_diff
    from stratadiff.output import json_report, terminal, text, yaml_report

    _setup_logging(debug)

    # --- Load config ---
    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if max_depth is not None:
        cfg.diff.max_depth = max_depth

    if verbose or debug:
        console.print(f"[dim]Max depth: {cfg.diff.max_depth or 'unlimited'}[/dim]")
        console.print(f"[dim]Format: {cfg.output.format}[/dim]")

    # --- Run diff ---
    try:
        file1 = File.from_path(left)
        file2 = File.from_path(right)
        node = run_diff(file1, file2, DiffOptions(max_depth=cfg.diff.max_depth))
    except NoDiff:
        if verbose:
            console.print("[green]✓[/green] Files are identical")
        raise typer.Exit(code=0)
    except DiffError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- Output ---
    renderers = {"text": text.render, "json": json_report.render, "yaml": yaml_report.render}
    report_text = renderers[cfg.output.format](node)

    stdout = Console(highlight=False)
    if cfg.output.format == "text" and cfg.output.color and stdout.is_terminal:
        terminal.render(node, stdout)
    else:
        typer.echo(report_text, nl=False)

    # --- Write to file ---
    if output:
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=1)


# ── ini ───────────────────────────────────────────────────────────────────────


@app.command()
def ini(
    file: Path = typer.Argument(..., help="setup.cfg-style file"),
    get: Optional[str] = typer.Option(None, "--get", "-g", help="Print one value: SECTION.KEY"),
) -> None:
    """Parse a setup.cfg-style INI file and print it as JSON."""
    from stratadiff.ini import DEFAULT_SECTION, IniError, load

    try:
        parsed = load(file)
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {file}: {exc}")
        raise typer.Exit(code=2) from exc
    except IniError as exc:
        console.print(f"[bold red]Parse error:[/bold red] {file}: {exc}")
        raise typer.Exit(code=2) from exc

    if get is None:
        typer.echo(json.dumps(parsed.to_dict(), indent=2, ensure_ascii=False))
        raise typer.Exit(code=0)

    # Section names may contain dots (options.extras_require); keys rarely do.
    section, _, key = get.rpartition(".")
    value = parsed.get(section or DEFAULT_SECTION, key)
    if value is None:
        console.print(f"[yellow]⚠[/yellow]  {get} not found in {file}")
        raise typer.Exit(code=1)
    typer.echo(value)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .stratadiff.toml in the current directory."""
    from stratadiff.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"stratadiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """stratadiff: recursive semantic diffs of artifacts and archives."""
