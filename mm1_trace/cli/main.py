"""
mm1-trace CLI.

Traces an MM1 capture file record by record:

    mm1-trace -f scan_d00.bin
    mm1-trace -f scan_d00.bin -p
    mm1-trace -f scan_d00.bin -s -c mm1trace.yml

Exit codes: 0=clean, 1=usage/IO/config error, 2=structural error
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer._click.exceptions import UsageError
from typer.core import TyperCommand

from .. import __version__
from ..config import TraceConfig, load_config
from ..core.decoder import MM1Decoder, TrailingBytes
from ..core.errors import ErrorCode, MM1Error, exit_code_for
from ..core.report import TraceSummary
from ..formats.buffer_header import BufferHeader
from ..formats.pixel_record import PixelRecord, MAPPING_TICK_SECONDS
from ..formats.reader import MM1Reader
from ..plot import plot_spectrum


logger = logging.getLogger(__name__)

PROG = "mm1-trace"

USAGE = f"""{PROG} options
 -f file   : MM1 file to trace
 -p        : Plot the spectrum
 -c config : YAML configuration file
 -s        : Print a per-channel summary
 -v        : Verbose (debug) logging
 -h, -?    : Show this help"""

EXIT_USAGE = exit_code_for(ErrorCode.E4002_USAGE)
EXIT_CONFIG = exit_code_for(ErrorCode.E3001_INVALID_CONFIG)
EXIT_FILE = exit_code_for(ErrorCode.E4001_FILE_READ_FAILED)


console = Console()
err_console = Console(stderr=True)


def _error(message: str):
    err_console.print("[red]error:[/]", escape(message), soft_wrap=True, highlight=False)


def _usage(err: bool = False):
    typer.echo(USAGE, err=err)


class TraceCommand(TyperCommand):
    """Report command-line mistakes with the usage text and exit code 1."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except UsageError as e:
            _error(e.format_message())
            _usage(err=True)
            raise typer.Exit(EXIT_USAGE)


def _help_callback(value: bool):
    if value:
        _usage()
        raise typer.Exit(EXIT_USAGE)


def format_buffer(header: BufferHeader) -> str:
    return (
        f"BUFFER: [0x{header.offset:08x}:0x{header.end_offset:08x}] "
        f"num:{header.buffer_number} id:{header.id_char} detChan:{header.det_chan} "
        f"pixels:{header.pixel_count} pixel:{header.start_pixel}"
    )


def format_pixel(record: PixelRecord, tick_seconds: float = MAPPING_TICK_SECONDS) -> str:
    return (
        f" PIXEL: [0x{record.offset:08x}:0x{record.end_offset:08x}] "
        f"num:{record.pixel_number} size:{record.block_size} chsize:{record.ch_size} "
        f"realtime:{record.realtime_seconds(tick_seconds):.6f} "
        f"livetime:{record.livetime_seconds(tick_seconds):.6f} "
        f"triggers:{record.triggers} output-events:{record.output_events}"
    )


def format_trailing(trailing: TrailingBytes) -> str:
    return f"BUFFER: 0x{trailing.remaining:08x} bytes in file remaining"


def _print_summary(summary: TraceSummary):
    """Print per-channel summary table."""
    table = Table(title="Summary")
    table.add_column("detChan", justify="right")
    table.add_column("Buffers", justify="right")
    table.add_column("Pixels", justify="right")
    table.add_column("Triggers", justify="right")
    table.add_column("Output events", justify="right")

    for chan, stats in sorted(summary.channels.items()):
        table.add_row(
            str(chan),
            f"{stats.buffers:,}",
            f"{stats.pixels:,}",
            f"{stats.triggers:,}",
            f"{stats.output_events:,}",
        )

    console.print()
    console.print(table)
    console.print(
        f"Buffers: {summary.buffers:,}  Pixels: {summary.pixels:,}  "
        f"Consumed: {summary.consumed_bytes:,} bytes  "
        f"Remaining: {summary.trailing_bytes:,} bytes",
        highlight=False,
    )


def _setup_logging(cfg: TraceConfig, verbose: bool):
    level = logging.DEBUG if verbose else cfg.logging.level_value
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("mm1_trace").setLevel(level)


app = typer.Typer(
    name=PROG,
    help="Trace and validate MM1 mapping-mode capture files",
    add_completion=False,
)


@app.command(cls=TraceCommand, context_settings={"help_option_names": []})
def trace(
    file: Optional[Path] = typer.Option(None, "-f", help="MM1 file to trace"),
    plot: bool = typer.Option(False, "-p", help="Plot the spectrum"),
    config_path: Optional[Path] = typer.Option(None, "-c", "--config", help="YAML configuration file"),
    summary: bool = typer.Option(False, "-s", "--summary", help="Print a per-channel summary"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
    show_help: bool = typer.Option(
        False, "-h", "-?", is_eager=True, callback=_help_callback, help="Show usage",
    ),
):
    """Trace an MM1 capture file."""
    if file is None:
        _error("no file")
        _usage(err=True)
        raise typer.Exit(EXIT_USAGE)

    try:
        cfg = load_config(config_path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        _error(f"config: {e}")
        raise typer.Exit(EXIT_CONFIG)

    problems = cfg.validate()
    if problems:
        for problem in problems:
            _error(f"config: {problem}")
        raise typer.Exit(EXIT_CONFIG)

    _setup_logging(cfg, verbose)
    logger.debug(f"{PROG} v{__version__}")

    typer.echo(f"Loading MM1 trace file: {file}")

    try:
        mm1_file = MM1Reader.open(file)
    except FileNotFoundError as e:
        _error(f"file stat: {e}")
        raise typer.Exit(EXIT_FILE)
    except OSError as e:
        _error(f"file read: {e}")
        raise typer.Exit(EXIT_FILE)

    decoder = MM1Decoder(
        mm1_file.data,
        max_channels=cfg.format.max_channels,
        strict_pixel_mode=cfg.format.strict_pixel_mode,
    )
    stats = TraceSummary(source_file=str(file), size_bytes=mm1_file.size_bytes)
    tick = cfg.format.tick_seconds

    try:
        for event in decoder.events():
            if isinstance(event, BufferHeader):
                stats.add_buffer(event)
                typer.echo(format_buffer(event))
            elif isinstance(event, PixelRecord):
                stats.add_pixel(event)
                typer.echo(format_pixel(event, tick))
                if plot:
                    for line in plot_spectrum(event.spectrum, None, cfg.plot.cols, cfg.plot.rows):
                        typer.echo(line)
                    typer.echo("")
            else:
                stats.trailing_bytes = event.remaining
                if event.remaining:
                    typer.echo(format_trailing(event))
    except MM1Error as e:
        stats.add_error(e)
        _error(e.message)
        if summary:
            _print_summary(stats)
        raise typer.Exit(e.exit_code)

    if summary:
        _print_summary(stats)


def main():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
