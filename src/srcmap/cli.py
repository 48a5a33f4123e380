"""CLI interface for srcmap using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Dict, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from srcmap import __description__, __version__
from srcmap.config import LogLevel, SrcmapConfig, load_config
from srcmap.errors import InvalidArgument
from srcmap.models.source_file import SourceFile, source_file_from_dwarf_path, source_file_from_path
from srcmap.models.source_map import SourceMapEntry, get_source_line_bounds
from srcmap.processors import load_processor_registry
from srcmap.utils.conversion import bytes_to_hex, bytes_to_long, hex_to_bytes, long_to_bytes
from srcmap.utils.paths import try_normalize_dwarf_path

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="srcmap",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"srcmap version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """srcmap - Canonical source-file keys for binary analysis."""


def _setup_logging(level: LogLevel) -> None:
    """Route log records through rich at the configured level."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level.to_logging())
    root_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _load(config_path: Optional[Path], log_level: Optional[str] = None) -> SrcmapConfig:
    """Load configuration and configure logging, exiting on failure."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    level = config.logging.level
    if log_level:
        try:
            level = LogLevel(log_level.lower())
        except ValueError:
            valid = ", ".join(lvl.value for lvl in LogLevel)
            console.print(f"[red]Error:[/red] Invalid log level '{escape(log_level)}'. Must be one of: {valid}")
            raise typer.Exit(1)
    _setup_logging(level)
    return config


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)


def _check_format(format: str, valid_formats: List[str]) -> None:
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{escape(format)}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file path (default: search for .srcmap.json)")
]
LogLevelOption = Annotated[
    Optional[str],
    typer.Option("--log-level", help="Log level: error, warn, info, debug (default: from config)")
]


@app.command()
def normalize(
    paths: Annotated[
        List[str],
        typer.Argument(help="Source paths as recorded in debug info")
    ],
    base_dir: Annotated[
        Optional[str],
        typer.Option("--base-dir", "-b", help="Name of the synthetic root directory (default: from config)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: plain, table, json (default: plain)")
    ] = "plain",
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Normalize debug-info source paths into canonical absolute paths.

    Relative paths (starting with ./) are rooted at /BASE_DIR; paths that
    climb above that root are rooted at /BASE_DIR_N.
    """
    _check_format(format, ["plain", "table", "json"])
    cfg = _load(config, log_level)
    base_dir = base_dir if base_dir is not None else cfg.normalize.base_dir

    results = [(path, try_normalize_dwarf_path(path, base_dir)) for path in paths]
    failures = [(path, result.error) for path, result in results if not result.success]

    if format == "json":
        payload = [
            {"path": path, "normalized": result.value}
            if result.success
            else {"path": path, "error": str(result.error), "errorType": type(result.error).__name__}
            for path, result in results
        ]
        typer.echo(jsonlib.dumps(payload, indent=2))
    elif format == "table":
        table = Table(title=f"Normalized paths (base: {base_dir})")
        table.add_column("Path", style="cyan")
        table.add_column("Normalized", style="green")
        for path, result in results:
            shown = escape(result.value) if result.success else f"[red]{escape(str(result.error))}[/red]"
            table.add_row(escape(path), shown)
        console.print(table)
    else:
        for path, result in results:
            if result.success:
                typer.echo(result.value)
            else:
                console.print(f"[red]Error:[/red] {escape(path)}: {escape(str(result.error))}")

    if failures:
        logger.debug(f"{len(failures)} of {len(paths)} paths failed to normalize")
        raise typer.Exit(1)


@app.command("source-file")
def source_file(
    path: Annotated[
        str,
        typer.Argument(help="Source path (native or as recorded in debug info)")
    ],
    id_type: Annotated[
        Optional[str],
        typer.Option("--id-type", "-t", help="Identifier type: none, unknown, timestamp_64, md5, sha1, sha256, sha512")
    ] = None,
    identifier: Annotated[
        Optional[str],
        typer.Option("--identifier", "-i", help="Identifier bytes as hex (optional 0x prefix)")
    ] = None,
    base_dir: Annotated[
        Optional[str],
        typer.Option("--base-dir", "-b", help="Apply debug-info rebasing with this synthetic root")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: plain, json (default: json)")
    ] = "json",
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Build the source file key for PATH and an optional identifier."""
    _check_format(format, ["plain", "json"])
    cfg = _load(config, log_level)
    kind = id_type if id_type is not None else cfg.normalize.default_id_type

    try:
        id_bytes = hex_to_bytes(identifier)
        if base_dir is not None:
            key = source_file_from_dwarf_path(path, base_dir, kind, id_bytes)
        else:
            key = source_file_from_path(path, kind, id_bytes)
    except InvalidArgument as e:
        _fail(e)

    if format == "json":
        typer.echo(jsonlib.dumps(key.to_dict(), indent=2))
    else:
        typer.echo(str(key))


@app.command("long")
def long_command(
    value: Annotated[
        str,
        typer.Argument(help="Signed 64-bit integer (decimal or 0x-prefixed hex)")
    ],
) -> None:
    """Print the 8-byte big-endian encoding of VALUE as hex."""
    try:
        number = int(value, 0)
    except ValueError:
        _fail(InvalidArgument(f"not an integer: {value}", value))

    try:
        typer.echo(bytes_to_hex(long_to_bytes(number)))
    except InvalidArgument as e:
        _fail(e)


@app.command("hex")
def hex_command(
    text: Annotated[
        str,
        typer.Argument(help="Exactly 8 bytes as hex digits (optional 0x prefix)")
    ],
) -> None:
    """Print the signed 64-bit value encoded big-endian by TEXT."""
    try:
        typer.echo(str(bytes_to_long(hex_to_bytes(text))))
    except InvalidArgument as e:
        _fail(e)


@app.command()
def processors(
    processor: Annotated[
        Optional[str],
        typer.Option("--processor", "-p", help="Filter by processor name (case-insensitive)")
    ] = None,
    endian: Annotated[
        Optional[str],
        typer.Option("--endian", "-e", help="Filter by endianness: little, big, LE, BE")
    ] = None,
    size: Annotated[
        Optional[int],
        typer.Option("--size", "-s", help="Filter by address size in bits")
    ] = None,
    ldefs: Annotated[
        Optional[Path],
        typer.Option("--ldefs", help="Language definition file (default: bundled table)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """List processor targets from the language definition table."""
    _check_format(format, ["table", "json"])
    cfg = _load(config, log_level)
    source = ldefs if ldefs is not None else cfg.processors.ldefs

    try:
        registry = load_processor_registry(source)
        targets = registry.find(processor=processor, endian=endian, size=size)
    except InvalidArgument as e:
        _fail(e)

    if format == "json":
        payload = [target.model_dump(mode="json", by_alias=True) for target in targets]
        typer.echo(jsonlib.dumps(payload, indent=2))
        return

    if not targets:
        console.print("[yellow]No processor targets match the given filters[/yellow]")
        return

    table = Table(title=f"Processor targets ({len(targets)} found)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Endian", style="magenta")
    table.add_column("Size", style="dim", justify="right")
    table.add_column("SLA", style="white")
    table.add_column("Description", style="white")
    for target in targets:
        table.add_row(target.id, target.endian.value, str(target.size), target.sla_file, escape(target.description))
    console.print(table)


@app.command()
def bounds(
    entries_file: Annotated[
        Path,
        typer.Argument(help="JSON file with source map entries (list or {\"entries\": [...]})")
    ],
    path: Annotated[
        Optional[str],
        typer.Option("--path", "-p", help="Only consider entries for this source path")
    ] = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Print the minimum and maximum mapped line numbers as JSON."""
    _load(config, log_level)

    if not entries_file.exists():
        console.print(f"[red]Error:[/red] Entries file does not exist: {escape(str(entries_file))}")
        raise typer.Exit(1)

    try:
        with open(entries_file, encoding="utf-8") as f:
            data = jsonlib.load(f)
    except jsonlib.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON in {escape(str(entries_file))}: {e}")
        raise typer.Exit(1)

    try:
        entries = [SourceMapEntry.from_dict(item) for item in _entry_items(data)]
        if path is not None:
            wanted = SourceFile(path).path
            entries = [entry for entry in entries if entry.source_file.path == wanted]
        line_bounds = get_source_line_bounds(entries)
    except InvalidArgument as e:
        _fail(e)

    result: Dict[str, Any] = {"entries": len(entries), "bounds": None}
    if line_bounds is not None:
        result["bounds"] = line_bounds.to_dict()
    typer.echo(jsonlib.dumps(result, indent=2))


def _entry_items(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise InvalidArgument("entries must be a JSON list", data)
    return data


if __name__ == "__main__":
    app()
