"""Output history inspection.

Summarizes a node sequence into a serializable report: what each node is,
which hooks it sits in and which enchantments produced it. Used by the CLI
to show what a story thread emitted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from hookweave.enchant.models import Enchantment
from hookweave.hooks import Hook
from hookweave.output import LineBreak, Link, Text
from hookweave.style import ENCHANTMENT, HOOK

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hookweave.output import OutputNode

NodeKind = Literal["text", "link", "line_break", "other"]


class NodeView(BaseModel):
    """One output node as seen by a reader of the history."""

    index: int = Field(ge=0)
    kind: NodeKind
    text: str
    hooks: list[str] = Field(default_factory=list, description="name#activation")
    enchantments: list[str] = Field(default_factory=list)
    style_keys: list[str] = Field(default_factory=list)
    clickable: bool = False


class OutputReport(BaseModel):
    """Inspection result for an output history."""

    nodes: list[NodeView] = Field(default_factory=list)
    hook_names: list[str] = Field(default_factory=list)

    @property
    def links(self) -> list[NodeView]:
        return [n for n in self.nodes if n.kind == "link"]

    def plain_text(self) -> str:
        """Concatenated display text of every node."""
        return "".join(n.text for n in self.nodes)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)


def _kind(node: OutputNode) -> NodeKind:
    if isinstance(node, Text):
        return "text"
    if isinstance(node, Link):
        return "link"
    if isinstance(node, LineBreak):
        return "line_break"
    return "other"


def describe_node(index: int, node: OutputNode) -> NodeView:
    hooks = [f"{h.name}#{h.activation}" for h in node.style.get_values(HOOK) if isinstance(h, Hook)]
    enchantments = [
        str(e) for e in node.style.get_values(ENCHANTMENT) if isinstance(e, Enchantment)
    ]
    return NodeView(
        index=index,
        kind=_kind(node),
        text=node.text,
        hooks=hooks,
        enchantments=enchantments,
        style_keys=node.style.keys(),
        clickable=isinstance(node, Link) and node.action is not None,
    )


def inspect_output(nodes: Iterable[OutputNode]) -> OutputReport:
    """Build an ``OutputReport`` for ``nodes``."""
    views = [describe_node(i, node) for i, node in enumerate(nodes)]
    hook_names: dict[str, None] = {}
    for view in views:
        for hook in view.hooks:
            hook_names.setdefault(hook.rsplit("#", 1)[0], None)
    return OutputReport(nodes=views, hook_names=list(hook_names))
