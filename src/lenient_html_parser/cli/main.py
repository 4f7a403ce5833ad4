"""Main CLI entry point for the lenient-html command-line tool.

Commands:
    parse   Parse HTML files and print their node forests
    fetch   Retrieve a page over HTTP and print its node forest
    tokens  Print the raw token stream of an HTML file
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from lenient_html_parser import __version__
from lenient_html_parser.api import LenientHTMLParser
from lenient_html_parser.shared import (
    ConfigValidationError,
    FetchError,
    MalformedMarkup,
    ParserConfig,
    configure_logging,
    get_logger,
)
from lenient_html_parser.tree import ParseResult, to_html, to_json, to_text_tree

OUTPUT_FORMATS = ["json", "text", "html", "summary"]

logger = get_logger(__name__, component="cli")


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from ``--config`` and flag overrides."""
    config = ParserConfig()
    config_path: Optional[Path] = getattr(args, "config", None)
    if config_path is not None:
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigValidationError(
                f"Cannot read configuration file {config_path}: {e}",
                field_name="config",
            ) from e
        config = ParserConfig.from_json(content)

    overrides: Dict[str, Any] = {}
    if getattr(args, "lenient", False):
        overrides["scan__strict_termination"] = False
    if getattr(args, "no_repair", False):
        overrides["repair__enable_balance_repair"] = False
    if getattr(args, "unclosed", None):
        overrides["tree__unclosed_policy"] = args.unclosed
    if getattr(args, "timeout", None):
        overrides["fetch__timeout_seconds"] = args.timeout
    return config.override(**overrides) if overrides else config


def format_result(result: ParseResult, format_type: str) -> str:
    """Render one parse result in the requested output format."""
    if format_type == "json":
        return to_json(result.forest)
    if format_type == "text":
        return to_text_tree(result.forest)
    if format_type == "html":
        return to_html(result.forest)
    if format_type == "summary":
        data = result.summary()
        data["diagnostics"] = [d.to_dict() for d in result.diagnostics]
        return json.dumps(data, indent=2)
    raise ValueError(f"Unknown output format: {format_type}")


def _emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        print(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Results written to {output}", file=sys.stderr)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="lenient-html",
        description="Parse possibly malformed HTML into a tree of nodes"
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )
    common.add_argument("--output", "-o", type=Path, help="Output file (default: stdout)")
    common.add_argument("--config", "-c", type=Path, help="JSON configuration file")
    common.add_argument(
        "--lenient",
        action="store_true",
        help="Drop unterminated trailing markup instead of failing"
    )
    common.add_argument(
        "--no-repair",
        action="store_true",
        help="Skip tag balance repair"
    )
    common.add_argument(
        "--unclosed",
        choices=["flush", "nest"],
        help="How to place elements left open at end of input"
    )

    parse_parser = subparsers.add_parser("parse", parents=[common], help="Parse HTML files")
    parse_parser.add_argument("paths", nargs="+", type=Path, help="HTML files to parse")
    parse_parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding of the input files (default: utf-8)"
    )

    fetch_parser = subparsers.add_parser("fetch", parents=[common], help="Fetch and parse a URL")
    fetch_parser.add_argument("url", help="URL of the HTML page")
    fetch_parser.add_argument("--timeout", type=float, help="Request timeout in seconds")

    tokens_parser = subparsers.add_parser("tokens", help="Print the token stream of a file")
    tokens_parser.add_argument("path", type=Path, help="HTML file to tokenize")
    tokens_parser.add_argument("--config", "-c", type=Path, help="JSON configuration file")
    tokens_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Drop unterminated trailing markup instead of failing"
    )
    tokens_parser.add_argument("--json", action="store_true", help="Emit tokens as JSON")

    return parser


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    parser = LenientHTMLParser(load_config(args))
    outputs: List[str] = []
    exit_code = 0

    for path in args.paths:
        if not path.is_file():
            print(f"File not found: {path}", file=sys.stderr)
            exit_code = 1
            continue
        try:
            text = path.read_text(encoding=args.encoding)
            result = parser.parse(text)
        except (MalformedMarkup, UnicodeDecodeError) as e:
            logger.warning("Failed to parse file", extra={"file": str(path)})
            print(f"{path}: {e}", file=sys.stderr)
            exit_code = 1
            continue
        rendered = format_result(result, args.format)
        if len(args.paths) > 1 and args.format in ("text", "html"):
            rendered = f"==> {path} <==\n{rendered}"
        outputs.append(rendered)

    if outputs:
        _emit("\n".join(outputs), args.output)
    return exit_code


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handle fetch command."""
    parser = LenientHTMLParser(load_config(args))
    try:
        result = parser.parse_url(args.url)
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MalformedMarkup as e:
        print(f"{args.url}: {e}", file=sys.stderr)
        return 1
    _emit(format_result(result, args.format), args.output)
    return 0


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle tokens command."""
    parser = LenientHTMLParser(load_config(args))
    if not args.path.is_file():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1
    try:
        tokenization = parser.tokenize(args.path.read_text(encoding="utf-8"))
    except MalformedMarkup as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps([token.to_dict() for token in tokenization.tokens], indent=2))
    else:
        for token in tokenization.tokens:
            print(f"{token.position.line}:{token.position.column}\t{token}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.verbose:
            configure_logging("DEBUG")
        elif args.quiet:
            configure_logging("ERROR")
        else:
            configure_logging(load_config(args).global_.logging_level)

        if args.command == "parse":
            return cmd_parse(args)
        if args.command == "fetch":
            return cmd_fetch(args)
        if args.command == "tokens":
            return cmd_tokens(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except ConfigValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
