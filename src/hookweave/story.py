"""Story thread runtime.

A ``Story`` runs passages written as generator methods. Passages yield
output nodes one at a time; the story flattens embedded fragments, stamps
each node with the style entries in scope, and records it in an
append-only output history that enchantments are matched against.

Example:
    class Cellar(Story):
        def start(self):
            with self.in_hook("door"):
                yield self.text("A heavy door")
            yield self.enchant_into_link(self.hook_ref("door"), self.open_door)

        def open_door(self):
            yield self.text("It creaks open.")
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from hookweave.config import EngineConfig
from hookweave.enchant import (
    EnchantCommand,
    HookReference,
    execute,
    match,
    materialize_links,
    resolve_reference,
)
from hookweave.errors import FragmentDepthError, NoLinkInActionError
from hookweave.hooks import Hook, HookActivations, HookRegistry
from hookweave.observability.logging import get_logger
from hookweave.output import EmbedFragment, LineBreak, Link, OutputNode, Text
from hookweave.style import HOOK, StyleContext

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from contextlib import AbstractContextManager

    from hookweave.output import Fragment

log = get_logger(__name__)


class Story:
    """Base class for stories; subclasses implement ``start``.

    Attributes:
        config: Engine settings for this thread.
        style: Ambient style context shared by every passage of the thread.
        output: Every node produced so far, in production order.
        current_link_in_action: The link whose action is running, if any.
        activations: Numbers this thread's hook activations.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig.from_env()
        self.style = StyleContext(strict=self.config.strict_context)
        self.output: list[OutputNode] = []
        self.current_link_in_action: Link | None = None
        self.activations = HookActivations()

    def start(self) -> Iterator[OutputNode]:
        """Opening passage."""
        return iter(())

    # -------------------------------------------------------------------------
    # Node construction
    # -------------------------------------------------------------------------

    def text(self, content: Any) -> Text:
        return Text(str(content))

    def link(self, label: Any, action: Fragment | None = None) -> Link:
        return Link(str(label), action)

    def line_break(self) -> LineBreak:
        return LineBreak()

    def fragment(self, fragment: Fragment) -> EmbedFragment:
        """Wrap ``fragment`` so it is expanded in place when yielded."""
        return EmbedFragment(fragment)

    def apply_style(self, key: str, value: Any) -> AbstractContextManager[None]:
        """Scope a style entry over everything produced inside the block."""
        return self.style.apply(key, value)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def hook(self, name: Any) -> Hook:
        """Create a fresh activation of the hook ``name``."""
        return self.activations.activate(str(name))

    def hook_ref(self, name: Any) -> HookReference:
        """Reference all nodes inside hooks named ``name``."""
        return HookReference(str(name))

    def in_hook(self, name: Any) -> AbstractContextManager[None]:
        """Tag everything produced inside the block with a new hook activation."""
        return self.apply_style(HOOK, self.hook(name))

    def hooks(self) -> HookRegistry:
        """Index the hooks present in the output history."""
        return HookRegistry.from_output(self.output)

    # -------------------------------------------------------------------------
    # Enchantment
    # -------------------------------------------------------------------------

    def enchant(
        self,
        reference: Any,
        command: EnchantCommand,
        fragment: Fragment,
    ) -> EmbedFragment:
        """Replay ``fragment`` over every region of the history matching ``reference``.

        The history is matched now; the replay runs only when the returned
        fragment is consumed.

        Args:
            reference: A hook reference or hook handle, or any value whose
                string form is matched as literal text.
            command: Command recorded on each enchantment.
            fragment: Called once per matched region.

        Returns:
            A fragment to yield from the calling passage.
        """
        descriptor = resolve_reference(reference)
        enchantments = match(list(self.output), descriptor, command)
        return self.fragment(lambda: execute(enchantments, fragment, self.style))

    def enchant_hook(
        self,
        hook_name: str,
        command: EnchantCommand,
        fragment: Fragment,
        wrap: bool = False,
        link_text_prefix: bool = False,
    ) -> EmbedFragment:
        """Enchant the hook ``hook_name``, matching when the result is consumed.

        Args:
            hook_name: Hook to enchant.
            command: Command recorded on each enchantment.
            fragment: Replacement content.
            wrap: Re-tag the replacement content with a fresh ``hook_name`` hook.
            link_text_prefix: Emit the label of the link being activated first.
        """
        prefixed: Fragment = (
            partial(self._prefix_with_link_text, hook_name, fragment)
            if link_text_prefix
            else fragment
        )
        wrapped: Fragment = partial(self._wrap_with_hook, hook_name, prefixed) if wrap else prefixed

        return self.fragment(partial(self._enchant_hook_thread, hook_name, command, wrapped))

    def enchant_into_link(self, reference: Any, link_action: Fragment) -> EmbedFragment:
        """Turn every region matching ``reference`` into links running ``link_action``."""
        return self.enchant(
            reference,
            EnchantCommand.REPLACE,
            lambda: materialize_links(self.style, link_action),
        )

    def _enchant_hook_thread(
        self, hook_name: str, command: EnchantCommand, fragment: Fragment
    ) -> Iterator[OutputNode]:
        yield self.enchant(self.hook_ref(hook_name), command, fragment)

    def _wrap_with_hook(self, hook_name: str, fragment: Fragment) -> Iterator[OutputNode]:
        with self.in_hook(hook_name):
            yield self.fragment(fragment)

    def _prefix_with_link_text(self, hook_name: str, fragment: Fragment) -> Iterator[OutputNode]:
        if self.current_link_in_action is None:
            raise NoLinkInActionError(hook_name)
        yield self.text(self.current_link_in_action.text)
        yield self.fragment(fragment)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def stream(self, fragment: Fragment) -> Iterator[OutputNode]:
        """Lazily run ``fragment``, recording each produced node.

        Closing the returned iterator closes every nested fragment, so any
        style scopes they hold are released.
        """
        return self._flatten(fragment(), 0)

    def run(self, fragment: Fragment) -> list[OutputNode]:
        """Run ``fragment`` to completion and return the nodes it produced."""
        return list(self.stream(fragment))

    def begin(self) -> list[OutputNode]:
        """Reset the thread and run the opening passage."""
        self.output.clear()
        self.style.clear()
        self.current_link_in_action = None
        log.info("story_begin", story=type(self).__name__)
        return self.run(self.start)

    def activate_link(self, link: Link) -> list[OutputNode]:
        """Run ``link``'s action as the link in action.

        Returns:
            The nodes produced by the action; they are also appended to the history.
        """
        if link.action is None:
            return []

        previous = self.current_link_in_action
        self.current_link_in_action = link
        log.debug("link_activated", label=link.label)
        try:
            return self.run(link.action)
        finally:
            self.current_link_in_action = previous

    def find_link(self, label: str) -> Link | None:
        """Return the most recently produced link labelled ``label``."""
        for node in reversed(self.output):
            if isinstance(node, Link) and node.label == label:
                return node
        return None

    def _flatten(self, nodes: Iterable[OutputNode], depth: int) -> Iterator[OutputNode]:
        if depth > self.config.max_embed_depth:
            raise FragmentDepthError(limit=self.config.max_embed_depth)

        iterator = iter(nodes)
        try:
            for node in iterator:
                if isinstance(node, EmbedFragment):
                    yield from self._flatten(node.generator(), depth + 1)
                    continue

                stamped = node.with_style(self.style.snapshot().merged(node.style))
                self.output.append(stamped)
                yield stamped
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()
