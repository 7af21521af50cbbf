import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .emitter import generate_go_file
from .env import Settings, load_env
from .errors import EmitError, FormatterError, LoadError
from .formatter import CommandFormatter, Formatter, NoopFormatter
from .loader import read_tsv_file
from .logger import get_logger, reset_logger

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="variantgen",
        description="Generate the Go variants map from a TSV table",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    # Checked by hand so a missing flag exits 1 rather than argparse's 2
    parser.add_argument("--input", default="", help="input TSV file")
    parser.add_argument("--output", default="", help="output file")
    parser.add_argument("--package", default=settings.package, help=f"Go package of the generated file (default: {settings.package})")
    parser.add_argument("--import-path", default=settings.import_path, help="Go import path of the package declaring Variant")
    parser.add_argument("--formatter", default=settings.formatter, help=f"Formatter command run on the output (default: {settings.formatter})")
    parser.add_argument("--no-format", action="store_true", help="Skip the formatter step")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help=f"Log level (default: {settings.log_level})")
    return parser


def usage_error(parser: argparse.ArgumentParser, message: str) -> None:
    print(message, file=sys.stderr)
    parser.print_help(sys.stderr)
    raise SystemExit(1)


def build_formatter(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Formatter:
    if args.no_format:
        return NoopFormatter()
    if not args.formatter.strip():
        usage_error(parser, "Formatter command must not be empty (use --no-format to skip)")
    try:
        return CommandFormatter(args.formatter)
    except ValueError as e:
        usage_error(parser, f"Invalid formatter command: {e}")


def run(args: argparse.Namespace, formatter: Formatter) -> Path:
    """Load the table and write the generated file. Errors exit the process."""
    logger = get_logger()
    input_path = Path(args.input)
    output_path = Path(args.output)

    try:
        data = read_tsv_file(input_path)
    except LoadError as e:
        logger.error("Load failed", path=str(input_path), error=str(e))
        raise SystemExit(f"Failed to read TSV file {input_path}: {e}")

    try:
        generate_go_file(
            output_path,
            data,
            formatter=formatter,
            package=args.package,
            import_path=args.import_path,
        )
    except EmitError as e:
        logger.error("Generation failed", path=str(output_path), error=str(e))
        raise SystemExit(f"Failed to generate .go file {output_path}: {e}")
    except FormatterError as e:
        logger.error("Formatter failed", path=str(output_path), command=e.command, error=str(e))
        raise SystemExit(f"error: {e}")

    logger.log_metrics_summary()
    return output_path


def main(argv: Optional[List[str]] = None) -> None:
    load_env()
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    level = args.log_level or settings.log_level
    if level not in LOG_LEVELS:
        usage_error(parser, f"Invalid log level: {level}")

    reset_logger()
    try:
        get_logger(level=level, log_dir=settings.log_dir, enable_file=settings.log_dir is not None)
    except OSError as e:
        reset_logger()
        raise SystemExit(f"Cannot open log directory {settings.log_dir}: {e}")

    if not args.input:
        usage_error(parser, "Input file is required")
    if not args.output:
        usage_error(parser, "Output file is required")

    formatter = build_formatter(parser, args)

    output_path = run(args, formatter)
    print(f"Go file generated: {output_path}")


if __name__ == "__main__":
    main()
