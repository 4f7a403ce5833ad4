"""Position-tracking reader over an in-memory HTML text buffer.

The cursor addresses the buffer by character (code point) offset.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from lenient_html_parser.shared.errors import UnterminatedScan

CharPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class TextPosition:
    """Line/column/offset location inside the text buffer."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


class Cursor:
    """Reader with single and bounded multi-character lookahead.

    Every consuming operation only ever moves the offset forward; nothing
    else about the cursor changes.
    """

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Cursor requires str input, got {type(text).__name__}")
        self._text = text
        self._length = len(text)
        self._offset = 0
        self._line = 1
        self._column = 1

    @property
    def text(self) -> str:
        return self._text

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def at_end(self) -> bool:
        return self._offset >= self._length

    @property
    def remaining(self) -> int:
        return self._length - self._offset

    @property
    def position(self) -> TextPosition:
        return TextPosition(self._line, self._column, self._offset)

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it."""
        if self._offset < self._length:
            return self._text[self._offset]
        return None

    def peek_at(self, n: int) -> Optional[str]:
        """Return the character ``n`` positions ahead; ``peek_at(0)`` is ``peek()``."""
        if n < 0:
            raise ValueError("Lookahead distance must be >= 0")
        index = self._offset + n
        if index < self._length:
            return self._text[index]
        return None

    def peek_run(self, n: int) -> Optional[str]:
        """Return the next ``n`` characters, or ``None`` if fewer remain."""
        if n < 0:
            raise ValueError("Run length must be >= 0")
        if self.remaining < n:
            return None
        return self._text[self._offset:self._offset + n]

    def peek_while(self, predicate: CharPredicate) -> Optional[str]:
        """Look ahead over the run satisfying ``predicate``.

        Returns ``None`` when the run reaches the end of input, i.e. when no
        breaking character exists.
        """
        end = self._scan(predicate)
        if end >= self._length:
            return None
        return self._text[self._offset:end]

    def advance(self) -> Optional[str]:
        """Consume and return the next character."""
        if self._offset >= self._length:
            return None
        char = self._text[self._offset]
        self._move_to(self._offset + 1)
        return char

    def advance_run(self, n: int) -> Optional[str]:
        """Consume and return the next ``n`` characters.

        Nothing is consumed when fewer than ``n`` characters remain.
        """
        run = self.peek_run(n)
        if run is not None:
            self._move_to(self._offset + n)
        return run

    def consume_while(self, predicate: CharPredicate) -> str:
        """Consume the maximal (possibly empty) run satisfying ``predicate``."""
        end = self._scan(predicate)
        run = self._text[self._offset:end]
        self._move_to(end)
        return run

    def consume_while_inclusive(self, predicate: CharPredicate) -> str:
        """Consume the run satisfying ``predicate`` plus the character ending it.

        Raises:
            UnterminatedScan: The input ends inside the run. The cursor is left
                where it was.
        """
        end = self._scan(predicate)
        if end >= self._length:
            raise UnterminatedScan(
                self._offset,
                self._line,
                self._column,
                consumed=self._text[self._offset:end],
            )
        run = self._text[self._offset:end + 1]
        self._move_to(end + 1)
        return run

    def _scan(self, predicate: CharPredicate) -> int:
        text = self._text
        index = self._offset
        while index < self._length and predicate(text[index]):
            index += 1
        return index

    def _move_to(self, new_offset: int) -> None:
        consumed = self._text[self._offset:new_offset]
        newlines = consumed.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(consumed) - consumed.rfind("\n")
        else:
            self._column += len(consumed)
        self._offset = new_offset

    def __repr__(self) -> str:
        return f"Cursor(offset={self._offset}, length={self._length})"
