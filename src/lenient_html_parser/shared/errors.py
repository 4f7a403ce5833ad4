"""Exception hierarchy for lenient HTML parsing.

Only scan-level failures and network failures are raised; tag-balance
problems are repaired in place and reported as diagnostics instead.
"""

from typing import Any, Dict, Optional


class HTMLParserError(Exception):
    """Base exception for all errors raised by the package."""


class UnterminatedScan(HTMLParserError):
    """Raised by the cursor when an inclusive scan runs off the end of input.

    Attributes:
        offset: Character offset where the scan started
        line: Line number where the scan started
        column: Column number where the scan started
        consumed: Characters the scan would have consumed
    """

    def __init__(
        self,
        offset: int,
        line: int = 1,
        column: int = 1,
        consumed: str = "",
    ) -> None:
        super().__init__(
            f"Input ended at line {line}, column {column} before the scan "
            f"found its terminator"
        )
        self.offset = offset
        self.line = line
        self.column = column
        self.consumed = consumed

    @property
    def position(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


class MalformedMarkup(HTMLParserError):
    """Raised when the tokenizer meets markup it cannot terminate.

    The whole parse is aborted; no partial tree is returned.
    """

    def __init__(
        self,
        message: str,
        position: Optional[Dict[str, int]] = None,
        construct: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.position = position or {}
        self.construct = construct

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": str(self),
            "construct": self.construct,
            "position": self.position,
        }


class FetchError(HTMLParserError):
    """Raised when retrieving an HTML document over the network fails.

    The underlying transport exception is kept on ``cause`` (and as
    ``__cause__``) without being interpreted.
    """

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Failed to fetch {url}: {cause}")
        self.url = url
        self.cause = cause
