"""Core parser API with progressive disclosure for lenient HTML parsing.

Level 1 is a handful of module-level functions (``parse``, ``parse_string``,
``parse_file``, ``parse_url``); level 2 is the reusable
:class:`LenientHTMLParser`. Every parse runs the same pipeline:

    text -> HTMLTokenizer -> BalanceRepairEngine -> HTMLTreeBuilder -> forest

Tag-balance problems are repaired and reported as diagnostics. Unterminated
markup raises :class:`MalformedMarkup` (unless the configuration asks for a
best-effort scan) and network failures raise :class:`FetchError`; in both
cases no partial tree is returned.
"""

import time
import uuid
from pathlib import Path
from typing import IO, Any, Dict, Optional, Union

from lenient_html_parser.network import BrowserClient
from lenient_html_parser.shared import (
    MalformedMarkup,
    ParserConfig,
    get_logger,
)
from lenient_html_parser.tokenization import (
    BalanceRepairEngine,
    HTMLTokenizer,
    TokenizationResult,
)
from lenient_html_parser.tree import HTMLTreeBuilder, ParseResult

InputType = Union[str, Path, IO[str]]

MS_PER_SECOND = 1000
PREVIEW_LENGTH = 60

logger = get_logger(__name__, component="parse")


def _new_correlation_id(config: ParserConfig, correlation_id: Optional[str]) -> Optional[str]:
    if correlation_id is not None or not config.global_.enable_correlation_tracking:
        return correlation_id
    return uuid.uuid4().hex[:12]


def _run_pipeline(
    text: str,
    config: ParserConfig,
    correlation_id: Optional[str],
    repair_engine: Optional[BalanceRepairEngine] = None,
) -> ParseResult:
    start_time = time.time()
    log = logger.bind(correlation_id)

    log.debug(
        "Starting parse",
        extra={"char_count": len(text), "preview": text[:PREVIEW_LENGTH]}
    )

    try:
        tokenization = HTMLTokenizer(text, config.scan, correlation_id).tokenize()
    except MalformedMarkup as e:
        log.warning(
            "Parse aborted on malformed markup",
            extra={"construct": e.construct, "position": e.position}
        )
        raise

    result = ParseResult(correlation_id=correlation_id)
    result.diagnostics.extend(tokenization.diagnostics)
    result.performance.characters_processed = tokenization.character_count
    result.performance.tokens_generated = tokenization.token_count

    tokens = tokenization.tokens
    if config.repair.enable_balance_repair:
        engine = repair_engine or BalanceRepairEngine(correlation_id)
        repair = engine.repair(tokens)
        tokens = repair.tokens
        result.repair_plan = repair.plan
        result.diagnostics.extend(repair.diagnostics)
        result.performance.tokens_reclassified = len(repair.plan.reclassify)
        result.performance.tokens_removed = len(repair.plan.invalid)

    HTMLTreeBuilder(config.tree, correlation_id).build(tokens, result)
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

    log.info(
        "Parse completed",
        extra={
            "root_count": len(result.forest),
            "repair_count": result.repair_count,
            "processing_time_ms": result.performance.processing_time_ms,
        }
    )
    return result


def parse_string(
    html: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse HTML held in a string.

    Examples:
        >>> result = parse_string('<a href="x">link</a>')
        >>> result.forest[0].get_attribute("href")
        'x'

        Mismatched close tags are repaired:
        >>> [n.tag_name for n in parse_string("<a><b>text</a>").forest]
        ['a']

    Raises:
        MalformedMarkup: The input ends inside a tag, comment or quoted value
            and the configuration is strict.
    """
    if not isinstance(html, str):
        raise TypeError(f"parse_string expects str, got {type(html).__name__}")
    config = config or ParserConfig()
    return _run_pipeline(html, config, _new_correlation_id(config, correlation_id))


def parse_file(
    path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse an HTML file; the caller supplies the encoding."""
    file_path = Path(path)
    text = file_path.read_text(encoding=encoding)
    return parse_string(text, config, correlation_id)


def parse_url(
    url: str,
    client: Optional[BrowserClient] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Fetch ``url`` and parse the response body.

    Raises:
        FetchError: Retrieval failed; the transport error is passed through
            untouched.
    """
    config = config or ParserConfig()
    correlation_id = _new_correlation_id(config, correlation_id)
    if client is not None:
        body = client.get(url)
    else:
        with BrowserClient(config.fetch, correlation_id=correlation_id) as owned:
            body = owned.get(url)
    return _run_pipeline(body, config, correlation_id)


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse HTML from a string, a :class:`~pathlib.Path` or a text stream."""
    if isinstance(input_data, str):
        return parse_string(input_data, config, correlation_id)
    if isinstance(input_data, Path):
        return parse_file(input_data, config=config, correlation_id=correlation_id)
    if hasattr(input_data, "read"):
        content = input_data.read()
        if isinstance(content, bytes):
            raise TypeError("Binary streams are not supported; decode the input first")
        return parse_string(content, config, correlation_id)
    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


class LenientHTMLParser:
    """Reusable parser with fixed configuration and usage statistics.

    Examples:
        >>> parser = LenientHTMLParser(ParserConfig.lenient())
        >>> parser.parse("<p>unterminated <b").forest[0].tag_name
        'p'
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "lenient_html_parser")
        self._repair_engine = BalanceRepairEngine(correlation_id)
        self.reset_statistics()

    def parse(self, input_data: InputType) -> ParseResult:
        """Parse ``input_data`` with this parser's configuration."""
        start_time = time.time()
        if isinstance(input_data, Path):
            text = input_data.read_text(encoding="utf-8")
        elif isinstance(input_data, str):
            text = input_data
        elif hasattr(input_data, "read"):
            text = input_data.read()
        else:
            raise TypeError(f"Unsupported input type: {type(input_data).__name__}")

        correlation_id = _new_correlation_id(self.config, self.correlation_id)
        self._parse_count += 1
        try:
            result = _run_pipeline(text, self.config, correlation_id, self._repair_engine)
        except MalformedMarkup:
            self._failed_parses += 1
            raise
        finally:
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND
        return result

    def parse_url(self, url: str, client: Optional[BrowserClient] = None) -> ParseResult:
        """Fetch and parse ``url`` with this parser's configuration."""
        self._parse_count += 1
        try:
            return parse_url(url, client, self.config, self.correlation_id)
        except Exception:
            self._failed_parses += 1
            raise

    def tokenize(self, html: str) -> TokenizationResult:
        """Tokenize ``html`` without repairing or building a tree."""
        return HTMLTokenizer(html, self.config.scan, self.correlation_id).tokenize()

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration used by subsequent parses."""
        self.config = config
        self.logger.info(
            "Parser reconfigured",
            extra={"config_name": config.name}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "failed_parses": self._failed_parses,
            "successful_parses": self._parse_count - self._failed_parses,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "repair": self._repair_engine.get_repair_statistics(),
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0
        self._repair_engine.reset_statistics()
