"""Command-line interface for the JSON to MessagePack converter."""

import io
import logging
import sys
from pathlib import Path

import click

from . import __version__
from .converter import JSONMsgpackConverter
from .error_handler import ErrorHandler
from .hints import load_type_hints, merge_type_hints, parse_hint_option
from .types import ConversionError


@click.group()
@click.version_option(version=__version__)
def main():
    """JSON to MessagePack - Convert JSON documents to deterministic MessagePack."""
    pass


@main.command()
@click.argument('input_file', type=click.File('rb'))
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output file (default: stdout)')
@click.option('--hints', 'hints_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='JSON file mapping keys to lists of numeric type tags')
@click.option('--hint', '-H', 'hint_options', multiple=True, metavar='KEY=TAG[,TAG...]',
              help='Type hint for a key; an empty KEY applies to unnamed array values')
@click.option('--strict', is_flag=True, help='Fail when a value does not fit its hinted type')
@click.option('--hex', 'as_hex', is_flag=True, help='Write a hex dump instead of raw bytes')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def convert(input_file, output, hints_file, hint_options, strict, as_hex, verbose):
    """Convert a JSON file (or - for stdin) to MessagePack."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, stream=sys.stderr)
    error_handler = ErrorHandler()

    try:
        tables = [load_type_hints(hints_file)] if hints_file else []
        tables.extend(parse_hint_option(option) for option in hint_options)
    except (OSError, ValueError) as e:
        click.echo(f"❌ Invalid type hints: {e}", err=True)
        sys.exit(1)
    type_hints = merge_type_hints(tables)

    converter = JSONMsgpackConverter(type_hints=type_hints, strict=strict, enable_profiling=verbose)
    buffer = io.BytesIO()
    try:
        result = converter.convert_stream(input_file, buffer)
    except ConversionError as e:
        response = error_handler.handle_conversion_error(e)
        click.echo(f"❌ Error: {e}", err=True)
        click.echo(f"   • {response.suggested_action}", err=True)
        sys.exit(1)

    if result.metrics:
        metrics = result.metrics
        click.echo(f"⏱️  {metrics.duration:.4f}s, {metrics.throughput_mbps:.2f} MB/s, "
                   f"peak memory {metrics.memory_peak_mb:.1f} MB", err=True)

    data = buffer.getvalue()
    if as_hex:
        data = (data.hex(" ") + "\n").encode("ascii")

    if output:
        output.write_bytes(data)
        click.echo(f"✅ Wrote {len(data)} bytes to {output}", err=True)
    else:
        click.get_binary_stream('stdout').write(data)


@main.command(name='check-hints')
@click.argument('hints_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check_hints(hints_file):
    """Validate a type-hint file."""
    error_handler = ErrorHandler()

    try:
        raw = load_type_hints(hints_file)
    except (OSError, ValueError) as e:
        click.echo(f"❌ {e}")
        sys.exit(1)

    result = error_handler.validate_type_hints(raw)
    for warning in result.warnings:
        click.echo(f"⚠️  {warning}")
    if not result.is_valid:
        for error in result.errors:
            click.echo(f"❌ {error.message}")
        sys.exit(1)
    click.echo(f"✅ {len(raw)} type hint keys are valid")


if __name__ == '__main__':
    main()
