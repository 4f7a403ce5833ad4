"""Core HTML tokenization built on the character cursor.

The tokenizer classifies the upcoming input as text, an open tag, a
self-closing directive, or a close tag, and produces a flat ordered token
sequence. Comments are consumed and never emitted.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from lenient_html_parser.character import Cursor, TextPosition
from lenient_html_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    MalformedMarkup,
    ScanConfig,
    UnterminatedScan,
    get_logger,
)

from .tokens import Token, TokenType

QUOTE_CHARS = ('"', "'")
# Attribute names also accept the punctuation common in data-*, aria-* and
# namespaced attributes.
ATTRIBUTE_NAME_PUNCTUATION = frozenset("-_:.")
DIRECTIVE_TAG_NAME = "directive"
DIRECTIVE_TEXT_ATTRIBUTE = "text"
MS_PER_SECOND = 1000


def _is_alnum(char: str) -> bool:
    return char.isalnum()


def _is_attribute_name_char(char: str) -> bool:
    return char.isalnum() or char in ATTRIBUTE_NAME_PUNCTUATION


def _is_separator_char(char: str) -> bool:
    return not char.isalnum() and char != ">"


def _is_text_char(char: str) -> bool:
    return char != "<" and char != ">"


@dataclass
class TokenizationResult:
    """Result of tokenizing one text buffer."""

    tokens: List[Token]
    character_count: int = 0
    processing_time_ms: float = 0.0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def get_tokens_by_type(self, token_type: TokenType) -> List[Token]:
        return [token for token in self.tokens if token.type is token_type]

    def summary(self) -> Dict[str, Any]:
        distribution: Dict[str, int] = {}
        for token in self.tokens:
            distribution[token.type.name] = distribution.get(token.type.name, 0) + 1
        return {
            "token_count": self.token_count,
            "character_count": self.character_count,
            "processing_time_ms": self.processing_time_ms,
            "token_type_distribution": distribution,
            "diagnostic_count": len(self.diagnostics),
        }


class HTMLTokenizer:
    """Single-use tokenizer over one complete HTML text buffer.

    With ``ScanConfig.strict_termination`` (the default) any unterminated
    construct aborts tokenization with :class:`MalformedMarkup`. Otherwise the
    unterminated remainder of the input is dropped and reported as a warning.
    """

    def __init__(
        self,
        text: str,
        config: Optional[ScanConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "html_tokenizer")
        self.diagnostics: List[DiagnosticEntry] = []
        self._cursor = Cursor(text)

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    def __iter__(self) -> Iterator[Token]:
        token = self.next_token()
        while token is not None:
            yield token
            token = self.next_token()

    def next_token(self) -> Optional[Token]:
        """Return the next token, or ``None`` once only insignificant input remains.

        Raises:
            MalformedMarkup: An unterminated construct was met in strict mode.
        """
        while not self._cursor.at_end:
            token = self._scan_token()
            if token is not None:
                return token
        return None

    def tokenize(self) -> TokenizationResult:
        """Tokenize the rest of the buffer."""
        start_time = time.time()
        character_count = len(self._cursor.text)

        self.logger.debug(
            "Starting tokenization",
            extra={"char_count": character_count}
        )

        tokens = list(self)
        processing_time = (time.time() - start_time) * MS_PER_SECOND

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": len(tokens),
                "processing_time_ms": processing_time,
            }
        )

        return TokenizationResult(
            tokens=tokens,
            character_count=character_count,
            processing_time_ms=processing_time,
            diagnostics=list(self.diagnostics),
            correlation_id=self.correlation_id,
        )

    def _scan_token(self) -> Optional[Token]:
        char = self._cursor.peek()
        if char == "<":
            return self._next_tag()
        if char == ">":
            return self._skip_stray_close_bracket()
        return self._next_text()

    def _next_text(self) -> Optional[Token]:
        start = self._cursor.position
        text = self._cursor.consume_while(_is_text_char)
        if not text:
            return None
        if self.config.suppress_whitespace_text and not text.strip():
            return None
        return Token.text(text, start)

    def _skip_stray_close_bracket(self) -> None:
        start = self._cursor.position
        self._cursor.advance()
        self._add_diagnostic(
            DiagnosticSeverity.WARNING,
            "Stray '>' outside of a tag dropped",
            start,
        )
        return None

    def _next_tag(self) -> Optional[Token]:
        start = self._cursor.position
        span = self._cursor.peek_while(lambda c: c != ">")
        if span is None:
            return self._unterminated(self._construct_at_cursor(), start)

        if span.startswith("</"):
            return self._close_tag(span, start)
        if span.startswith("<!--"):
            return self._skip_comment(start)
        if span.startswith("<!"):
            return self._directive(start)
        return self._open_tag(start)

    def _construct_at_cursor(self) -> str:
        head = self._cursor.peek_run(min(4, self._cursor.remaining)) or ""
        if head.startswith("<!--"):
            return "comment"
        if head.startswith("</"):
            return "close tag"
        if head.startswith("<!"):
            return "directive"
        return "tag"

    def _close_tag(self, span: str, start: TextPosition) -> Token:
        raw = self._cursor.advance_run(len(span) + 1) or ""
        name = "".join(c for c in raw if c.isalnum())
        return Token.close_tag(name, start)

    def _skip_comment(self, start: TextPosition) -> None:
        try:
            self._cursor.consume_while_inclusive(lambda c: c != ">")
        except UnterminatedScan as e:
            return self._unterminated("comment", start, e)
        return None

    def _directive(self, start: TextPosition) -> Token:
        self._cursor.consume_while(_is_separator_char)
        text = self._cursor.consume_while(lambda c: c != ">")
        self._cursor.advance()
        return Token.self_close(
            DIRECTIVE_TAG_NAME,
            {DIRECTIVE_TEXT_ATTRIBUTE: text},
            start,
        )

    def _open_tag(self, start: TextPosition) -> Optional[Token]:
        cursor = self._cursor
        cursor.advance()
        name = cursor.consume_while(_is_alnum)
        attributes: Dict[str, str] = {}

        while True:
            char = cursor.peek()
            if char is None:
                return self._unterminated("tag", start)
            if char == ">":
                break

            cursor.consume_while(str.isspace)
            attr_name = cursor.consume_while(_is_attribute_name_char)
            separator = cursor.consume_while(_is_separator_char)

            quote = next((c for c in reversed(separator) if c in QUOTE_CHARS), None)
            if quote is not None:
                try:
                    raw = cursor.consume_while_inclusive(lambda c, q=quote: c != q)
                except UnterminatedScan as e:
                    return self._unterminated("quoted attribute value", start, e)
                value = raw[:-1]
            else:
                value = cursor.consume_while(_is_alnum)

            if attr_name:
                attributes[attr_name] = value

            cursor.consume_while(_is_separator_char)

        cursor.advance()
        return Token.open_tag(name, attributes, start)

    def _unterminated(
        self,
        construct: str,
        start: TextPosition,
        cause: Optional[UnterminatedScan] = None,
    ) -> None:
        message = (
            f"Unterminated {construct} starting at line {start.line}, "
            f"column {start.column}"
        )
        if self.config.strict_termination:
            self.logger.warning(
                "Aborting tokenization on unterminated markup",
                extra={"construct": construct, "offset": start.offset}
            )
            raise MalformedMarkup(message, start.to_dict(), construct) from cause

        dropped = self._cursor.advance_run(self._cursor.remaining) or ""
        self._add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"{message}; dropped {len(dropped)} trailing characters",
            start,
            details={"construct": construct},
        )
        return None

    def _add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        position: TextPosition,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="html_tokenizer",
            position=position.to_dict(),
            details=details,
            correlation_id=self.correlation_id,
        ))
        self.logger.debug(message, extra={"offset": position.offset})


def tokenize(
    text: str,
    config: Optional[ScanConfig] = None,
    correlation_id: Optional[str] = None,
) -> TokenizationResult:
    """Tokenize ``text`` with a fresh :class:`HTMLTokenizer`."""
    return HTMLTokenizer(text, config, correlation_id).tokenize()
