"""Output node model.

A story thread produces a flat sequence of output nodes. Each node records
the style entries that were in scope when it was produced; the runtime
stamps that style on emission and never mutates a node afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace

from hookweave.style import Style

Fragment = Callable[[], Iterator["OutputNode"]]
"""A zero-argument callable producing a fresh, lazy sequence of output nodes."""


@dataclass(frozen=True)
class OutputNode:
    """Base class for every produced output node."""

    style: Style = field(default_factory=Style, compare=False, kw_only=True, repr=False)

    @property
    def text(self) -> str:
        """Display text of the node."""
        return ""

    def with_style(self, style: Style) -> OutputNode:
        """Return a copy of this node carrying ``style``."""
        return replace(self, style=style)


@dataclass(frozen=True)
class Text(OutputNode):
    """Plain rendered text."""

    content: str

    @property
    def text(self) -> str:
        return self.content


@dataclass(frozen=True)
class Link(OutputNode):
    """An interactive node; activating it runs ``action``."""

    label: str
    action: Fragment | None = None

    @property
    def text(self) -> str:
        return self.label


@dataclass(frozen=True)
class EmbedFragment(OutputNode):
    """A nested fragment, expanded in place by the story thread."""

    generator: Fragment


@dataclass(frozen=True)
class LineBreak(OutputNode):
    @property
    def text(self) -> str:
        return "\n"
