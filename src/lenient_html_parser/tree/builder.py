"""Tree construction from a balanced HTML token sequence.

The builder consumes tokens once, left to right, keeping an explicit stack of
in-progress elements. Each stack frame owns its children list until the frame
is popped, at which point it is frozen into an :class:`ElementNode`.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from lenient_html_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TreeConfig,
    get_logger,
)
from lenient_html_parser.tokenization import RepairPlan, Token, TokenType

from .nodes import ElementNode, Forest, Node, TextNode, find_all, iter_nodes

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Forest produced by one parse, with diagnostics and metrics."""

    forest: Forest = ()
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    repair_plan: Optional[RepairPlan] = None
    correlation_id: Optional[str] = None

    @property
    def roots(self) -> Forest:
        return self.forest

    @property
    def element_count(self) -> int:
        return sum(1 for node in iter_nodes(self.forest) if isinstance(node, ElementNode))

    @property
    def repair_count(self) -> int:
        return self.repair_plan.repair_count if self.repair_plan else 0

    @property
    def is_empty(self) -> bool:
        return not self.forest

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [d for d in self.diagnostics if d.severity == severity]

    @property
    def has_errors(self) -> bool:
        return any(
            d.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for d in self.diagnostics
        )

    def find(self, tag_name: str) -> Optional[ElementNode]:
        """First element named ``tag_name`` anywhere in the forest."""
        matches = find_all(self.forest, tag_name)
        return matches[0] if matches else None

    def find_all(self, tag_name: str) -> List[ElementNode]:
        return find_all(self.forest, tag_name)

    def summary(self) -> Dict[str, Any]:
        """Get a short summary of the parse."""
        severities: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            name = diagnostic.severity.name
            severities[name] = severities.get(name, 0) + 1
        return {
            "root_count": len(self.forest),
            "element_count": self.element_count,
            "repair_count": self.repair_count,
            "diagnostics": severities,
            "processing_time_ms": self.performance.processing_time_ms,
            "correlation_id": self.correlation_id,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "forest": [node.to_dict() for node in self.forest],
            "summary": self.summary(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "performance": self.performance.to_dict(),
        }


class _OpenElement:
    """Stack frame for an element whose children are still being collected."""

    __slots__ = ("tag_name", "attributes", "children", "token")

    def __init__(self, token: Token) -> None:
        self.tag_name = token.value
        self.attributes = dict(token.attributes)
        self.children: List[Node] = []
        self.token = token

    def close(self) -> ElementNode:
        return ElementNode(self.tag_name, self.attributes, tuple(self.children))


class HTMLTreeBuilder:
    """Builds a node forest from balanced tokens.

    Close tag names are not re-validated here; balance repair has already
    matched them. Close tags arriving with an empty stack (possible when
    repair is disabled) are ignored with a warning.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "html_tree_builder")

    def build(
        self,
        tokens: Sequence[Token],
        result: Optional[ParseResult] = None,
    ) -> ParseResult:
        """Build the forest for ``tokens``.

        Args:
            tokens: Balanced token sequence
            result: Optional result to fill in; a fresh one is created otherwise

        Returns:
            ParseResult whose ``forest`` holds the top-level nodes
        """
        start_time = time.time()
        if result is None:
            result = ParseResult(correlation_id=self.correlation_id)

        self.logger.debug(
            "Starting tree building",
            extra={"token_count": len(tokens)}
        )

        roots: List[Node] = []
        stack: List[_OpenElement] = []
        elements_created = 0

        for token in tokens:
            if token.type is TokenType.OPEN_TAG:
                stack.append(_OpenElement(token))
            elif token.type is TokenType.CLOSE_TAG:
                if not stack:
                    result.add_diagnostic(
                        DiagnosticSeverity.WARNING,
                        f"Closing tag </{token.value}> with no open element ignored",
                        "html_tree_builder",
                        position=token.position.to_dict(),
                    )
                    continue
                element = stack.pop().close()
                elements_created += 1
                self._attach(element, stack, roots)
            elif token.type is TokenType.SELF_CLOSE:
                if not token.value:
                    continue
                element = ElementNode(token.value, dict(token.attributes))
                elements_created += 1
                self._attach(element, stack, roots)
            elif token.type is TokenType.TEXT:
                self._attach(TextNode(token.value), stack, roots)
            else:
                raise ValueError(f"Unhandled token type: {token.type}")

        if stack:
            elements_created += self._close_unclosed(stack, roots, result)

        result.forest = tuple(roots)
        result.performance.elements_created += elements_created
        result.performance.processing_time_ms += (time.time() - start_time) * MS_PER_SECOND

        self.logger.debug(
            "Tree building completed",
            extra={
                "root_count": len(roots),
                "elements_created": elements_created,
            }
        )
        return result

    @staticmethod
    def _attach(node: Node, stack: List[_OpenElement], roots: List[Node]) -> None:
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

    def _close_unclosed(
        self,
        stack: List[_OpenElement],
        roots: List[Node],
        result: ParseResult,
    ) -> int:
        unclosed_count = len(stack)
        names = [frame.tag_name for frame in stack]

        if self.config.unclosed_policy == "nest":
            while stack:
                element = stack.pop().close()
                self._attach(element, stack, roots)
        else:
            roots.extend(frame.close() for frame in stack)
            stack.clear()

        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            f"Closed {unclosed_count} element(s) left open at end of input",
            "html_tree_builder",
            details={"tags": names, "policy": self.config.unclosed_policy},
        )
        self.logger.debug(
            "Closed unclosed elements",
            extra={"unclosed_count": unclosed_count, "policy": self.config.unclosed_policy}
        )
        return unclosed_count


def build_tree(
    tokens: Sequence[Token],
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None,
) -> Forest:
    """Build and return just the forest for ``tokens``."""
    return HTMLTreeBuilder(config, correlation_id).build(tokens).forest
