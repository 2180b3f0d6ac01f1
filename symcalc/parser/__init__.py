"""
Parser Package

Grammar engine (flat labeled spans) and tree builder (span nesting) for
calculator input lines.
"""

from .grammar import FUNCTION_RULES, KEYWORDS, Grammar, Rule, Token, translate_position
from .tree import TreeNode, build_tree, parse

__all__ = [
    "FUNCTION_RULES",
    "KEYWORDS",
    "Grammar",
    "Rule",
    "Token",
    "translate_position",
    "TreeNode",
    "build_tree",
    "parse",
]
