"""Tag balance repair for tokenized HTML.

A single read-only forward pass over the token sequence decides which open
tags were never closed (they are reclassified as self-closing) and which
tokens cannot take part in a well-nested structure (they are removed). The
decision is recorded by token position in a :class:`RepairPlan`; applying the
plan is a separate step, so each half can be exercised on its own.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from lenient_html_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)

from .tokens import Token, TokenType

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class RepairPlan:
    """Position-addressed side table produced by the repair scan.

    Attributes:
        reclassify: Positions of OPEN_TAG tokens to turn into SELF_CLOSE
        invalid: Positions of tokens to delete
        unclosed: Positions of OPEN_TAG tokens still open when the scan ended
    """

    reclassify: FrozenSet[int] = frozenset()
    invalid: FrozenSet[int] = frozenset()
    unclosed: Tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when applying the plan leaves the tokens untouched."""
        return not self.reclassify and not self.invalid

    @property
    def repair_count(self) -> int:
        return len(self.reclassify) + len(self.invalid)


def plan_balance_repair(tokens: Sequence[Token]) -> RepairPlan:
    """Scan ``tokens`` and decide how to balance them.

    A close tag is matched against the nearest enclosing open tag of the same
    name. Every open tag above that match is treated as never closed. A close
    tag with no match anywhere on the stack is invalid, as is an open tag
    with an empty name.
    """
    stack: List[Tuple[int, str]] = []
    reclassify: List[int] = []
    invalid: List[int] = []

    for index, token in enumerate(tokens):
        if token.type is TokenType.OPEN_TAG:
            if not token.value:
                invalid.append(index)
            else:
                stack.append((index, token.value))
        elif token.type is TokenType.CLOSE_TAG:
            if not stack:
                invalid.append(index)
            elif stack[-1][1] == token.value:
                stack.pop()
            else:
                depth = _find_nearest_open(stack, token.value)
                if depth is None:
                    invalid.append(index)
                else:
                    reclassify.extend(position for position, _ in stack[depth + 1:])
                    del stack[depth:]
        elif token.type in (TokenType.TEXT, TokenType.SELF_CLOSE):
            continue
        else:
            raise ValueError(f"Unhandled token type: {token.type}")

    return RepairPlan(
        reclassify=frozenset(reclassify),
        invalid=frozenset(invalid),
        unclosed=tuple(position for position, _ in stack),
    )


def _find_nearest_open(stack: List[Tuple[int, str]], name: str) -> Optional[int]:
    for depth in range(len(stack) - 1, -1, -1):
        if stack[depth][1] == name:
            return depth
    return None


def apply_balance_repair(tokens: Sequence[Token], plan: RepairPlan) -> List[Token]:
    """Apply ``plan`` to ``tokens``: reclassify first, then drop invalid positions."""
    repaired: List[Token] = []
    for index, token in enumerate(tokens):
        if index in plan.invalid:
            continue
        if index in plan.reclassify and token.type is TokenType.OPEN_TAG:
            token = token.reclassified()
        repaired.append(token)
    return repaired


@dataclass
class RepairResult:
    """Balanced token sequence plus the plan and diagnostics that produced it."""

    tokens: List[Token]
    plan: RepairPlan
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def repair_count(self) -> int:
        return self.plan.repair_count


class BalanceRepairEngine:
    """Runs balance repair and reports what it changed.

    Keeps cumulative statistics across every token sequence it has repaired.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "balance_repair")
        self.reset_statistics()

    def repair(self, tokens: Sequence[Token]) -> RepairResult:
        """Plan and apply balance repair to ``tokens``."""
        start_time = time.time()
        plan = plan_balance_repair(tokens)
        repaired = apply_balance_repair(tokens, plan)
        diagnostics = self._describe(tokens, plan)
        processing_time = (time.time() - start_time) * MS_PER_SECOND

        self._runs += 1
        self._tokens_seen += len(tokens)
        self._reclassified += len(plan.reclassify)
        self._removed += len(plan.invalid)

        if not plan.is_empty:
            self.logger.info(
                "Balance repair applied",
                extra={
                    "reclassified": len(plan.reclassify),
                    "removed": len(plan.invalid),
                    "unclosed": len(plan.unclosed),
                }
            )

        return RepairResult(
            tokens=repaired,
            plan=plan,
            diagnostics=diagnostics,
            processing_time_ms=processing_time,
        )

    def _describe(self, tokens: Sequence[Token], plan: RepairPlan) -> List[DiagnosticEntry]:
        diagnostics: List[DiagnosticEntry] = []
        for index in sorted(plan.reclassify | plan.invalid):
            token = tokens[index]
            if index in plan.invalid:
                if token.type is TokenType.CLOSE_TAG:
                    message = f"Unmatched closing tag </{token.value}> removed"
                else:
                    message = "Opening tag without a name removed"
                severity = DiagnosticSeverity.WARNING
            else:
                message = f"Unclosed <{token.value}> treated as self-closing"
                severity = DiagnosticSeverity.INFO
            diagnostics.append(DiagnosticEntry(
                severity=severity,
                message=message,
                component="balance_repair",
                position=token.position.to_dict(),
                details={"token_index": index},
                correlation_id=self.correlation_id,
            ))
        return diagnostics

    def get_repair_statistics(self) -> Dict[str, Any]:
        """Cumulative statistics over every call to :meth:`repair`."""
        return {
            "runs": self._runs,
            "tokens_seen": self._tokens_seen,
            "tokens_reclassified": self._reclassified,
            "tokens_removed": self._removed,
        }

    def reset_statistics(self) -> None:
        self._runs = 0
        self._tokens_seen = 0
        self._reclassified = 0
        self._removed = 0
