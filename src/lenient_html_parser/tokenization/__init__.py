"""Tokenization layer for the lenient HTML parser.

Turns a text buffer into a flat token sequence and balances that sequence so
every remaining close tag has a matching open tag.
"""

from .recovery import (
    BalanceRepairEngine,
    RepairPlan,
    RepairResult,
    apply_balance_repair,
    plan_balance_repair,
)
from .tokenizer import HTMLTokenizer, TokenizationResult, tokenize
from .tokens import Token, TokenPosition, TokenType

__all__ = [
    "BalanceRepairEngine",
    "RepairPlan",
    "RepairResult",
    "apply_balance_repair",
    "plan_balance_repair",
    "HTMLTokenizer",
    "TokenizationResult",
    "tokenize",
    "Token",
    "TokenPosition",
    "TokenType",
]
