"""
Command-line interface for pagescan.

Analyzes a saved HTML page and prints the condensed page context or the
full analysis as JSON/YAML.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog
import yaml

from pagescan import __version__
from pagescan.analysis import PageAnalyzer, render_page_context
from pagescan.config import load_config
from pagescan.dom import SoupDocument
from pagescan.exceptions import ConfigError


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure structlog for CLI output on stderr."""
    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level),
        stream=sys.stderr,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pagescan",
        description="pagescan - inventory testable elements and resilient selectors in a page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pagescan login.html --url https://example.com/login
  pagescan checkout.html --format json -o analysis.json
  pagescan page.html --config pagescan.yaml --format yaml

Output Formats:
  text   - condensed page context for text-generation prompts (default)
  json   - full analysis result
  yaml   - full analysis result
""",
    )

    parser.add_argument("file", help="Saved HTML file to analyze")
    parser.add_argument(
        "--url",
        default="",
        help="URL the page was saved from (used for relative links and intent detection)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json", "yaml"],
        default="text",
        dest="output_format",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML analyzer configuration (default: $PAGESCAN_CONFIG)",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path (default: stdout)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"pagescan {__version__}")

    return parser


def run_analysis(args: argparse.Namespace) -> int:
    """
    Run the analysis described by ``args``.

    Returns:
        Exit code: 0 on success, 1 when the input cannot be read,
        2 for configuration errors.
    """
    logger = structlog.get_logger(__name__)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error("configuration_error", error=str(e))
        return 2

    try:
        html = Path(args.file).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error("input_unreadable", path=args.file, error=str(e))
        return 1

    result = PageAnalyzer(config).analyze(SoupDocument(html, url=args.url))

    if args.output_format == "json":
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"
    elif args.output_format == "yaml":
        output = yaml.safe_dump(result.to_dict(), sort_keys=False, allow_unicode=True)
    else:
        output = render_page_context(
            result,
            button_limit=config.context_button_limit,
            link_limit=config.context_link_limit,
        )

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(output, encoding="utf-8")
        logger.info("analysis_saved", path=str(output_path.absolute()))
    else:
        sys.stdout.write(output)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)

    try:
        sys.exit(run_analysis(args))
    except KeyboardInterrupt:
        print("\nAnalysis interrupted by user", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
