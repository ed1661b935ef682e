from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from jobtail.config import JobTailConfig, load_config, merge_config
from jobtail.errors import TailError
from jobtail.extract import tail_stream

app = typer.Typer(help="jobtail - keep the last lines of huge logs in bounded memory")


def _setup_logging(verbosity: int, source: str) -> None:
    level = logging.WARNING if verbosity == 0 else logging.DEBUG
    label = source.replace("%", "%%")
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(f"%(asctime)s %(levelname)s [{label}] %(message)s", "%Y-%m-%d %H:%M:%S")
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)


def _build_config(
    config_path: Optional[Path],
    max_line_length: Optional[int],
    encoding: Optional[str],
    verbosity: int,
) -> JobTailConfig:
    base = load_config(config_path)
    return merge_config(
        base,
        {
            "scanner": {"max_line_length": max_line_length, "encoding": encoding},
            "verbosity": verbosity or None,
        },
    )


@app.command()
def tail(
    path: Optional[Path] = typer.Argument(None, help="Log file to read; stdin when omitted or '-'"),
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Number of lines to keep"),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    max_line_length: Optional[int] = typer.Option(
        None, "--max-line-length", help="Longest accepted line"
    ),
    encoding: Optional[str] = typer.Option(None, "--encoding", help="Input encoding"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase verbosity"),
) -> None:
    """Print the last lines of a log file."""
    use_stdin = path is None or str(path) == "-"
    try:
        config_model = _build_config(config, max_line_length, encoding, verbosity)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    count = lines if lines is not None else config_model.tail.default_lines
    _setup_logging(config_model.verbosity, "stdin" if use_stdin else str(path))
    logging.getLogger(__name__).debug("Starting tail")
    try:
        if use_stdin:
            result = tail_stream(sys.stdin.buffer, count, config_model)
        else:
            with path.open("rb") as handle:
                result = tail_stream(handle, count, config_model)
    except (TailError, OSError) as exc:
        typer.echo(f"jobtail: {exc}", err=True)
        raise typer.Exit(code=1)
    if result.text:
        typer.echo(result.text)
    typer.echo(f"{result.total_lines} lines read", err=True)


@app.command("config-check")
def config_check(config_file: Path) -> None:
    """Validate a config file and show the effective settings."""
    try:
        config_model = load_config(config_file)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"default_lines: {config_model.tail.default_lines}")
    typer.echo(f"max_lines_cap: {config_model.tail.max_lines_cap}")
    typer.echo(f"max_line_length: {config_model.scanner.max_line_length}")
    typer.echo(f"chunk_size: {config_model.scanner.chunk_size}")
    typer.echo(f"encoding: {config_model.scanner.encoding} ({config_model.scanner.errors})")


if __name__ == "__main__":
    app()
