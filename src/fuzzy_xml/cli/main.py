"""Main CLI entry point for the fuzzy-xml command-line tool.

Provides two commands: ``parse`` prints the parsed tree of each input and
``check`` reports the recovery decisions made on each input.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from fuzzy_xml import __version__
from fuzzy_xml.api import parse_file, parse_string, to_json, to_text, to_xml
from fuzzy_xml.shared.config import ConfigError, ParserConfig
from fuzzy_xml.shared.logging import configure_logging, get_logger
from fuzzy_xml.shared.serialization import dump_json
from fuzzy_xml.tree import ParseResult

STDIN_SOURCE = "-"
MAX_LISTED_RECOVERIES = 5


class InputProcessor:
    """Reads CLI inputs and renders parse results."""

    def __init__(self, config: ParserConfig):
        self.config = config
        self.logger = get_logger(__name__, config.correlation_id, "cli_processor")

    def read_input(self, source: str) -> ParseResult:
        """Parse a file path, or standard input for ``-``."""
        if source == STDIN_SOURCE:
            return parse_string(sys.stdin.read(), config=self.config)
        return parse_file(source, config=self.config)

    def render(self, result: ParseResult, output_format: str) -> str:
        """Render the nodes of a result in the requested format."""
        if output_format == "text":
            return to_text(result.nodes)
        if output_format == "xml":
            return to_xml(
                result.nodes, self.config.root_tag, self.config.correlation_id
            )
        return to_json(result.nodes, indent=self.config.json_indent)

    def check_report(self, source: str, result: ParseResult) -> Dict[str, Any]:
        """Summarize the recovery events of one input."""
        report: Dict[str, Any] = {
            "input": source,
            "success": result.success,
            "well_formed": result.is_well_formed,
            "node_count": result.node_count,
            "recovery_count": result.recovery_count,
            "recoveries": [
                {
                    "kind": event.kind.name,
                    "position": event.position,
                    "tag_name": event.tag_name,
                    "message": event.message,
                }
                for event in result.recoveries
            ],
        }
        if not result.success:
            report["error"] = result.diagnostics[0].message
        return report


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="fuzzy-xml",
        description="Lenient parser for XML-like text such as LLM output"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse inputs and print trees")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        help="Files to parse ('-' reads standard input)"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text", "xml"],
        help="Output format (default: from config, json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Report recovery decisions made on inputs"
    )
    check_parser.add_argument(
        "paths",
        nargs="+",
        help="Files to check ('-' reads standard input)"
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any input needed recovery"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )
    check_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output, logs every recovery decision"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the effective configuration from a config file and global flags."""
    config = ParserConfig()
    config_path = getattr(args, "config", None)
    if config_path is not None:
        config = ParserConfig.from_file(config_path)

    if args.verbose:
        config = config.override(logging_level="DEBUG", log_recoveries=True)
    elif args.quiet:
        config = config.override(logging_level="ERROR")
    return config


def format_check_reports(reports: List[Dict[str, Any]], format_type: str) -> str:
    """Format check reports for output."""
    if format_type == "json":
        return json.dumps(reports, indent=2)

    if not reports:
        return "No inputs checked."

    clean = sum(1 for r in reports if r["success"] and r["well_formed"])
    lines = [f"Checked {len(reports)} inputs, {clean} without recoveries"]
    lines.append("-" * 60)

    for report in reports:
        if not report["success"]:
            lines.append(f"✗ {report['input']}")
            lines.append(f"   Error: {report['error']}")
            continue

        status = "✓" if report["well_formed"] else "~"
        lines.append(
            f"{status} {report['input']} "
            f"({report['node_count']} nodes, {report['recovery_count']} recoveries)"
        )
        recoveries = report["recoveries"]
        for event in recoveries[:MAX_LISTED_RECOVERIES]:
            lines.append(f"   @{event['position']}: {event['message']}")
        if len(recoveries) > MAX_LISTED_RECOVERIES:
            lines.append(
                f"   ... and {len(recoveries) - MAX_LISTED_RECOVERIES} more recoveries"
            )

    return "\n".join(lines)


def _parse_all(
    processor: InputProcessor, paths: List[str]
) -> List[Tuple[str, ParseResult]]:
    return [(source, processor.read_input(source)) for source in paths]


def _render_all(
    processor: InputProcessor,
    results: List[Tuple[str, ParseResult]],
    readable: List[Tuple[str, ParseResult]],
    output_format: str
) -> str:
    if len(results) == 1 and readable:
        return processor.render(readable[0][1], output_format)
    if output_format == "json":
        return dump_json(
            [{"input": source, "nodes": result.to_dict()} for source, result in readable],
            indent=processor.config.json_indent,
        )
    return "\n\n".join(
        f"== {source}\n{processor.render(result, output_format)}"
        for source, result in readable
    )


def cmd_parse(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle parse command."""
    output_format = args.format or config.output_format
    processor = InputProcessor(config)
    results = _parse_all(processor, args.paths)

    failed = 0
    for source, result in results:
        if not result.success:
            failed += 1
            print(f"Error: {result.diagnostics[0].message}", file=sys.stderr)

    readable = [(source, result) for source, result in results if result.success]
    try:
        formatted_output = _render_all(processor, results, readable, output_format)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        try:
            args.output.write_text(formatted_output + "\n", encoding="utf-8")
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    elif readable:
        print(formatted_output)

    return 0 if failed == 0 else 1


def cmd_check(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle check command."""
    processor = InputProcessor(config)
    reports = [
        processor.check_report(source, result)
        for source, result in _parse_all(processor, args.paths)
    ]

    print(format_check_reports(reports, args.format))

    if any(not report["success"] for report in reports):
        return 1
    if args.strict and any(report["recovery_count"] for report in reports):
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging_level)

    try:
        if args.command == "parse":
            return cmd_parse(args, config)
        if args.command == "check":
            return cmd_check(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
