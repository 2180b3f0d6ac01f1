"""
Tree builder: nests the grammar's flat token trace into a hierarchy.

Tokens arrive in post-order (a production is recorded after everything it
matched), so a token's descendants are exactly the pending tokens whose
spans it contains. A stack of pending nodes is enough to recover the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .grammar import Grammar, Rule, Token


@dataclass(frozen=True)
class TreeNode:
    """
    A parsed token with its nested sub-matches.

    Attributes:
        token: The labeled span
        children: Contained tokens in ascending ``begin`` order
        source: The parsed input line
    """

    token: Token
    children: tuple[TreeNode, ...] = ()
    source: str = field(default="", repr=False)

    @property
    def rule(self) -> Rule:
        return self.token.rule

    @property
    def text(self) -> str:
        """Matched input with surrounding blanks removed."""
        return self.source[self.token.begin:self.token.end].strip()

    def child(self, rule: Rule) -> TreeNode | None:
        """Return the first child tagged ``rule``."""
        for node in self.children:
            if node.rule is rule:
                return node
        return None

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal."""
        yield self
        for node in self.children:
            yield from node.walk()

    def format(self, depth: int = 0) -> str:
        """Render one ``rule "text"`` line per node, indented by depth."""
        quoted = self.source[self.token.begin:self.token.end]
        lines = [f"{' ' * depth}{self.rule.value} {quoted!r}"]
        lines.extend(node.format(depth + 1) for node in self.children)
        return "\n".join(lines)


def build_tree(tokens: list[Token], source: str = "") -> TreeNode | None:
    """
    Nest tokens by span containment.

    Zero-width tokens are dropped. For each token, every pending node whose
    span it contains becomes its child, in the order they were matched.

    Args:
        tokens: Tokens in emission order
        source: The input the spans refer to

    Returns:
        The root node, or None when no token carries content
    """
    stack: list[TreeNode] = []
    for token in tokens:
        if token.begin == token.end:
            continue
        children: list[TreeNode] = []
        while stack and token.contains(stack[-1].token):
            children.append(stack.pop())
        children.reverse()
        stack.append(TreeNode(token=token, children=tuple(children), source=source))

    if not stack:
        return None
    # A successful parse leaves the top-level production as the only entry.
    return stack[-1]


def parse(text: str) -> TreeNode | None:
    """Match ``text`` and build its tree; raises ParseError on bad input."""
    return build_tree(Grammar().parse(text), text)
