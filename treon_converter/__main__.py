"""CLI entry point for the Treon payload converter.

Usage::

    treon-converter convert payloads.jsonl
    treon-converter convert payloads.json -s console -s file -o ./data
    cat payload.json | treon-converter convert - --format json
    treon-converter convert payloads.jsonl --config converter.yaml
    treon-converter list-fields
    treon-converter list-sinks
    treon-converter init-config --output converter.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treon_converter.processor import ProcessingStats

# ---------------------------------------------------------------------------
# Sample YAML config template for init-config
# ---------------------------------------------------------------------------
_SAMPLE_CONFIG = """\
# Treon payload converter configuration

converter:
  log_level: INFO                     # DEBUG, INFO, WARNING, ERROR
  vibration_exclude: []               # raw metric names to skip, e.g. [Kurtosis, Crest]

# Sinks define where measurements are written.
sinks:
  - type: console
    fmt: text                         # text or json

  # - type: file
  #   path: ./output
  #   format: csv                     # csv, json, or parquet
"""


# ======================================================================
# Main entry point
# ======================================================================


def main(argv: list[str] | None = None) -> None:
    epilog = textwrap.dedent("""\
        examples:
          treon-converter convert payloads.jsonl
          treon-converter convert payloads.json -s console -s file -o ./data --output-format csv
          cat payload.json | treon-converter convert - --format json
          treon-converter convert payloads.jsonl --config converter.yaml
          treon-converter list-fields
          treon-converter list-sinks
          treon-converter init-config --output converter.yaml
    """)

    parser = argparse.ArgumentParser(
        prog="treon-converter",
        description="Convert Treon sensor node payloads into time-series measurements.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    # -- convert -----------------------------------------------------------
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert payload files (JSON, JSON array or JSON Lines) to measurements.",
    )
    convert_parser.add_argument(
        "inputs",
        nargs="+",
        help="Payload files to read; '-' reads from stdin.",
    )
    convert_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML config file. When set, --sink/--output-*/--exclude flags are ignored.",
    )
    convert_parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    convert_parser.add_argument(
        "--sink",
        "-s",
        action="append",
        dest="sinks",
        choices=["console", "file"],
        help="Sink(s) to enable (repeatable). Default: console.",
    )
    convert_parser.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Console sink output format (default: text).",
    )
    convert_parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        default="./output",
        help="Output directory for the file sink (default: ./output).",
    )
    convert_parser.add_argument(
        "--output-format",
        type=str,
        default="csv",
        choices=["csv", "json", "parquet"],
        help="File sink format (default: csv).",
    )
    convert_parser.add_argument(
        "--exclude",
        "-x",
        action="append",
        default=None,
        help="Raw vibration metric name to skip (repeatable).",
    )

    # -- list-fields -------------------------------------------------------
    subparsers.add_parser(
        "list-fields",
        help="List the recognized payload fields and vibration metric tables.",
    )

    # -- list-sinks --------------------------------------------------------
    subparsers.add_parser(
        "list-sinks",
        help="List all available sink types.",
    )

    # -- init-config -------------------------------------------------------
    init_parser = subparsers.add_parser(
        "init-config",
        help="Generate a sample YAML configuration file.",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write config to this file instead of stdout.",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    # -- Dispatch ----------------------------------------------------------
    if args.command == "convert":
        _cmd_convert(args)
    elif args.command == "list-fields":
        _cmd_list_fields()
    elif args.command == "list-sinks":
        _cmd_list_sinks()
    elif args.command == "init-config":
        _cmd_init_config(args.output)
    else:
        parser.print_help()


# ======================================================================
# Command implementations
# ======================================================================


def _cmd_convert(args: argparse.Namespace) -> None:
    """Convert the given payload files."""
    from treon_converter.processor import PayloadReadError

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)-30s %(levelname)-7s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        if args.config:
            stats = _convert_from_config(args.config, args.inputs)
        else:
            stats = _convert_quick(
                inputs=args.inputs,
                enabled_sinks=args.sinks or ["console"],
                console_fmt=args.format,
                output_dir=args.output_dir,
                output_format=args.output_format,
                exclude=args.exclude or [],
            )
    except PayloadReadError as exc:
        logging.getLogger("treon_converter").error("%s", exc)
        sys.exit(1)

    print(
        f"{stats.payloads} payloads, {stats.measurements} measurements, {stats.errors} errors",
        file=sys.stderr,
    )


def _convert_from_config(config_path: str, inputs: list[str]) -> ProcessingStats:
    """Load YAML config and convert *inputs*."""
    from treon_converter.config import load_yaml_config
    from treon_converter.processor import PayloadProcessor
    from treon_converter.sinks.factory import create_sink

    cfg = load_yaml_config(config_path)
    logging.getLogger().setLevel(getattr(logging, cfg.log_level, logging.INFO))

    processor = PayloadProcessor(cfg.build_converter())

    if not cfg.sink_configs:
        from treon_converter.sinks.console import ConsoleSink

        processor.add_sink(ConsoleSink())
    else:
        for sink_dict in cfg.sink_configs:
            processor.add_sink(create_sink(sink_dict))

    return processor.run_files(inputs)


def _convert_quick(
    inputs: list[str],
    enabled_sinks: list[str],
    console_fmt: str,
    output_dir: str,
    output_format: str,
    exclude: list[str],
) -> ProcessingStats:
    """Convert with CLI-specified sinks (console and/or file)."""
    from treon_converter.converter import PayloadConverter
    from treon_converter.processor import PayloadProcessor

    processor = PayloadProcessor(PayloadConverter(vibration_exclude=exclude))

    if "console" in enabled_sinks:
        from treon_converter.sinks.console import ConsoleSink

        processor.add_sink(ConsoleSink(fmt=console_fmt))

    if "file" in enabled_sinks:
        from treon_converter.sinks.file import FileSink

        processor.add_sink(FileSink(path=output_dir, format=output_format))

    return processor.run_files(inputs)


# -- list-fields -----------------------------------------------------------


def _cmd_list_fields() -> None:
    from treon_converter.converter import METRIC_NAME_MAPPING, METRIC_SCALARS, OPTIONAL_FIELDS

    print("\nOptional scalar fields (ingestion id: <SensorNodeId>$<Field>):\n")
    for field in OPTIONAL_FIELDS:
        print(f"  {field}")

    print("\nVibration metric remapping (scalar payloads only):\n")
    print(f"  {'Sent as':<12} {'Ingested as'}")
    print("  " + "-" * 24)
    for raw, mapped in METRIC_NAME_MAPPING.items():
        print(f"  {raw:<12} {mapped}")

    print("\nVibration scale factors (other metrics: 1):\n")
    print(f"  {'Metric':<12} {'Scale':>8}")
    print("  " + "-" * 21)
    for metric, scale in METRIC_SCALARS.items():
        print(f"  {metric:<12} {scale:>8g}")
    print()


# -- list-sinks ------------------------------------------------------------


def _cmd_list_sinks() -> None:
    from treon_converter.sinks.factory import _SINK_REGISTRY

    print(f"\n{'Sink Type':<14} {'Class':<20} {'Module'}")
    print("-" * 62)
    for name, (module_path, class_name) in _SINK_REGISTRY.items():
        print(f"{name:<14} {class_name:<20} {module_path}")
    print()


# -- init-config ------------------------------------------------------------


def _cmd_init_config(output_path: str | None) -> None:
    if output_path:
        from pathlib import Path

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(_SAMPLE_CONFIG)
        print(f"Sample config written to {output_path}")
    else:
        print(_SAMPLE_CONFIG)


# ======================================================================
if __name__ == "__main__":
    main()
