"""Main CLI entry point for the parsenip command-line tool.

Reads a markup document from standard input (or one document per path),
tokenizes and builds it, and prints the tree, the JSON result, or the token
stream. The exit status is 0 when every document parsed and 1 otherwise.
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional

from parsenip import __version__
from parsenip.api import MarkupParser, ParseResult
from parsenip.shared.config import ConfigError, ParserConfig
from parsenip.shared.logging import configure_logging, get_logger

STDIN_SOURCE = "<stdin>"
OUTPUT_FORMATS = ["text", "json", "tokens"]
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.parser_config = ParserConfig.default()
        self.max_workers: Optional[int] = None
        self.output_format = "text"
        self.log_level = self.parser_config.log_level

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CLIConfig":
        """Build configuration from parsed command-line arguments.

        Raises:
            ConfigError: The configuration file is unreadable or invalid
        """
        config = cls()
        if args.config:
            config.parser_config = ParserConfig.from_file(args.config)
        if args.strict:
            config.parser_config = config.parser_config.override(
                tree__strict_trailing_content=True
            )
        if args.workers:
            config.max_workers = args.workers
        config.output_format = args.format

        config.log_level = config.parser_config.log_level
        if args.trace:
            config.log_level = logging.DEBUG
        elif args.verbose:
            config.log_level = logging.INFO
        elif args.quiet:
            config.log_level = logging.ERROR
        return config


def render_result(result: ParseResult, output_format: str) -> str:
    """Render a result in the requested output format."""
    if output_format == "json":
        return json.dumps(result.to_dict(), indent=2)
    if output_format == "tokens":
        return "\n".join(str(token) for token in result.tokens)
    if result.root is None:
        return "(empty document)"
    return result.root.outline()


def summarize(result: ParseResult, output_format: str) -> Dict[str, Any]:
    """Reduce a result to plain data that can cross process boundaries."""
    return {
        "source": result.source,
        "success": result.success,
        "stage": result.error_stage,
        "error": str(result.error) if result.error is not None else None,
        "output": render_result(result, output_format),
    }


def _process_file(path: str, config: ParserConfig, output_format: str) -> Dict[str, Any]:
    return summarize(MarkupParser(config).parse_file(path), output_format)


class DocumentProcessor:
    """Runs the parser over standard input or a list of files."""

    def __init__(self, config: CLIConfig) -> None:
        self.config = config
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_text(self, text: str, source: str = STDIN_SOURCE) -> Dict[str, Any]:
        """Parse one in-memory document."""
        parser = MarkupParser(self.config.parser_config)
        return summarize(parser.parse(text, source=source), self.config.output_format)

    def process_paths(self, paths: List[Path]) -> List[Dict[str, Any]]:
        """Parse each file, in parallel when more than one worker is allowed."""
        config = self.config.parser_config
        output_format = self.config.output_format

        if len(paths) <= 1 or self.config.max_workers == 1:
            return [_process_file(str(path), config, output_format) for path in paths]

        self.logger.info(
            "Parsing files in parallel",
            extra={"file_count": len(paths), "max_workers": self.config.max_workers}
        )
        with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = [
                executor.submit(_process_file, str(path), config, output_format)
                for path in paths
            ]
            return [future.result() for future in futures]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="parsenip",
        description="Parse strictly nested markup into an element tree"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Markup files to parse (default: read standard input)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON parser configuration file"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject content after the root element"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers for multiple files"
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log the token stream and span plan"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def report(results: List[Dict[str, Any]]) -> int:
    """Print outputs and errors; return the exit code."""
    failures = 0
    for result in results:
        if result["success"]:
            print(result["output"])
        else:
            failures += 1
            print(
                f"error: {result['source']}: {result['stage']}: {result['error']}",
                file=sys.stderr
            )
    return EXIT_OK if failures == 0 else EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    try:
        config = CLIConfig.from_args(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(config.log_level)
    processor = DocumentProcessor(config)

    try:
        if args.paths:
            results = processor.process_paths(args.paths)
        else:
            results = [processor.process_text(sys.stdin.read())]
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    if config.output_format == "json":
        # Failed documents are reported inside the JSON payload.
        payload = [json.loads(result["output"]) for result in results]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
        return EXIT_OK if all(r["success"] for r in results) else EXIT_FAILURE

    return report(results)


if __name__ == "__main__":
    sys.exit(main())
