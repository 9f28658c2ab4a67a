"""Style entries and the ambient style context stack.

Every output node carries a ``Style``: the ordered set of ``(key, value)``
entries that were visible when the node was produced. While a story thread
runs, a single ``StyleContext`` holds the entries currently in scope.
Scopes are opened with context managers so that a frame is always released,
including when a generator holding the scope is closed early.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from hookweave.errors import StyleContextError
from hookweave.observability.logging import get_logger

log = get_logger(__name__)

# Well-known style keys
HOOK = "hook"
ENCHANTMENT = "enchantment"

StyleEntry = tuple[str, Any]


class Style:
    """Immutable, ordered collection of style entries.

    Multiple entries may share a key (e.g. nested hooks); lookups preserve
    push order, most recently pushed last.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: tuple[StyleEntry, ...] | list[StyleEntry] = ()) -> None:
        self._entries: tuple[StyleEntry, ...] = tuple(entries)

    def __iter__(self) -> Iterator[StyleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Style):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Style({list(self._entries)!r})"

    def keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        return list(dict.fromkeys(k for k, _ in self._entries))

    def get_values(self, key: str) -> list[Any]:
        """Return all values stored under ``key``, oldest first."""
        return [v for k, v in self._entries if k == key]

    def first(self, key: str, predicate: Callable[[Any], bool] | None = None) -> Any | None:
        """Return the first value under ``key`` accepted by ``predicate``."""
        for k, v in self._entries:
            if k == key and (predicate is None or predicate(v)):
                return v
        return None

    def merged(self, other: Style) -> Style:
        """Return a new style with ``other``'s entries appended."""
        if not other:
            return self
        if not self:
            return other
        return Style(self._entries + other._entries)


class _Frame:
    """One pushed scope. Identity matters, not content."""

    __slots__ = ("entries",)

    def __init__(self, entries: tuple[StyleEntry, ...]) -> None:
        self.entries = entries


class StyleContext:
    """The ambient style stack of a single story thread.

    Args:
        strict: Raise ``StyleContextError`` instead of warning when a frame
            is released while other frames are still on top of it.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self._frames: list[_Frame] = []
        self.strict = strict

    @property
    def depth(self) -> int:
        """Number of frames currently pushed."""
        return len(self._frames)

    def clear(self) -> None:
        self._frames.clear()

    def snapshot(self) -> Style:
        """Freeze the currently visible entries into a ``Style``."""
        return Style(tuple(entry for frame in self._frames for entry in frame.entries))

    def get_values(self, key: str) -> list[Any]:
        """Return visible values for ``key``, most recently pushed last."""
        return [v for frame in self._frames for k, v in frame.entries if k == key]

    @contextmanager
    def apply(self, key: str, value: Any) -> Iterator[None]:
        """Push a single entry for the duration of the ``with`` block."""
        with self._scope(((key, value),)):
            yield

    @contextmanager
    def apply_style(self, style: Style) -> Iterator[None]:
        """Push every entry of ``style`` as one frame."""
        with self._scope(tuple(style)):
            yield

    @contextmanager
    def _scope(self, entries: tuple[StyleEntry, ...]) -> Iterator[None]:
        frame = _Frame(entries)
        self._frames.append(frame)
        try:
            yield
        finally:
            self._release(frame)

    def _release(self, frame: _Frame) -> None:
        if self._frames and self._frames[-1] is frame:
            self._frames.pop()
            return

        keys = tuple(dict.fromkeys(k for k, _ in frame.entries))
        depth = len(self._frames)
        # Remove by identity so a late release never pops an unrelated frame
        self._frames = [f for f in self._frames if f is not frame]
        if self.strict:
            raise StyleContextError(keys=keys, depth=depth)
        log.warning("style_frame_released_out_of_order", keys=list(keys), depth=depth)
