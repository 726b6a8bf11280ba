"""
TextMap: the public entry point for finding and replacing text in a tree.

TextMap owns the tree root, the current mapping snapshot and the text-node
configuration. Queries run against the mapping; replace_text resolves a
text leaf, splices replacement nodes into the tree and marks the mapping
stale. Nothing is refreshed automatically: call remap() after each
replacement before relying on addresses again.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any

from lxml import etree

from .adapters import ElementAdapter, NodeAdapter, TreeAdapter, adapter_for, parse_tag
from .address import Address
from .constants import DEFAULT_TEXT_TAG
from .errors import StaleMappingError, StaleMappingWarning, TextGraftError, TextNotFoundError
from .locator import TextLocator, resolve_address
from .mapper import MappingEntry, MappingSnapshot, build_mapping
from .models.node import Node
from .operations.batch import BatchOperations
from .replacer import MatchSpan, TextReplacer
from .results import EditResult
from .suggestions import SuggestionGenerator

logger = logging.getLogger(__name__)


class TextMap:
    """Maps the text of a tree to node addresses and replaces text in place.

    Args:
        root: Root node of the tree, or a precomputed mapping (a sequence
            of (text, address) pairs or a MappingSnapshot) for headless use
        adapter: Tree adapter; inferred from the root when omitted
        text_node_type: Marker that identifies text leaves (defaults to the
            adapter's; for lxml trees this is the text tag, e.g. "w:t")
        create_text_node: Factory for new text nodes (defaults to the adapter's)
        strict: Raise StaleMappingError instead of warning when a stale
            mapping is used against the tree

    Example:
        >>> text_map = TextMap(Node.from_html("<p>all the foo people are all bar</p>"))
        >>> text_map.replace_text("all", [Node.text_node("todo")]).remap()
        >>> text_map.get_text()
        'todo the foo people are all bar'
    """

    def __init__(
        self,
        root: Any,
        adapter: TreeAdapter | None = None,
        text_node_type: Any = None,
        create_text_node: Callable[[str], Any] | None = None,
        strict: bool = False,
    ) -> None:
        self.strict = strict
        self._generation = 0
        self._locator = TextLocator()
        self._batch_ops = BatchOperations(self)

        headless = isinstance(root, (list, tuple, MappingSnapshot))
        self.root = None if headless else root

        if adapter is None:
            adapter = NodeAdapter() if headless else adapter_for(root, text_node_type)
        if isinstance(adapter, ElementAdapter) and isinstance(text_node_type, str):
            # Element tags are compared in qualified form ("{ns}t", not "w:t")
            text_node_type = parse_tag(text_node_type, adapter.nsmap)
        self.adapter = adapter
        self.text_node_type = (
            adapter.text_node_type if text_node_type is None else text_node_type
        )
        self.create_text_node = create_text_node or adapter.create_text_node
        self._replacer = TextReplacer(adapter, self.create_text_node)

        if headless:
            self._mapping = MappingSnapshot.from_pairs(root, self._generation)
        else:
            self._mapping = self._build_snapshot()

    @classmethod
    def from_html(cls, markup: str, **kwargs: Any) -> TextMap:
        """Build a TextMap over an HTML fragment wrapped in a <div>.

        Example:
            >>> text_map = TextMap.from_html("<p>Done is the <b>one</b> thing.</p>")
            >>> text_map.get_address_for_text("one", preserve_word=True)
            '0.1.0'
        """
        return cls(Node.from_html(markup), **kwargs)

    @classmethod
    def from_xml(
        cls, source: str | Path | bytes, text_tag: str = DEFAULT_TEXT_TAG, **kwargs: Any
    ) -> TextMap:
        """Build a TextMap over an XML document.

        Args:
            source: Path to an XML file, or the XML document as bytes
            text_tag: Tag of the elements that carry text (e.g. "w:t")
            **kwargs: Passed to TextMap
        """
        if isinstance(source, bytes):
            root = etree.fromstring(source)
        else:
            root = etree.parse(str(source)).getroot()
        return cls(root, adapter=ElementAdapter(text_tag), **kwargs)

    # -------------------------------------------------------------------------
    # Mapping state
    # -------------------------------------------------------------------------

    @property
    def mapping(self) -> MappingSnapshot:
        """The current mapping snapshot."""
        return self._mapping

    @property
    def generation(self) -> int:
        """Number of replacements applied to the tree through this map."""
        return self._generation

    @property
    def is_stale(self) -> bool:
        """True when the tree changed after the mapping was built."""
        return self._mapping.generation != self._generation

    def remap(self, mapping: Iterable[Sequence[str]] | None = None) -> TextMap:
        """Rebuild the mapping from the root, or adopt an explicit one.

        Args:
            mapping: Mapping to adopt verbatim instead of walking the tree

        Returns:
            self, for chaining

        Raises:
            TextGraftError: If there is no root and no mapping was given
        """
        if mapping is not None:
            self._mapping = MappingSnapshot.from_pairs(mapping, self._generation)
        elif self.root is None:
            raise TextGraftError("Cannot remap without a tree root; pass a mapping")
        else:
            self._mapping = self._build_snapshot()
        return self

    def _build_snapshot(self) -> MappingSnapshot:
        entries = build_mapping(self.root, self.adapter, self.text_node_type)
        return MappingSnapshot(tuple(entries), self._generation)

    def _check_fresh(self, operation: str) -> None:
        if not self.is_stale:
            return
        if self.strict:
            raise StaleMappingError(self._mapping.generation, self._generation)
        warnings.warn(
            f"{operation}() used a mapping from generation {self._mapping.generation} "
            f"but the tree is at generation {self._generation}; call remap()",
            StaleMappingWarning,
            stacklevel=3,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_text(self) -> str:
        """Return the tree's visible text: all mapped text joined in order."""
        return self._mapping.text

    def get_address_for_text(
        self, text: str, case_sensitive: bool = True, preserve_word: bool = False
    ) -> Address | None:
        """Return the address of the first text node containing text."""
        return self._locator.address_for_text(self._mapping, text, case_sensitive, preserve_word)

    def get_addresses_for_text(
        self, text: str, case_sensitive: bool = True, preserve_word: bool = False
    ) -> list[Address] | None:
        """Return the addresses of every text node containing text, or None."""
        return self._locator.addresses_for_text(
            self._mapping, text, case_sensitive, preserve_word
        )

    def get_text_by_address(self, address: Address) -> str | None:
        return self._locator.text_by_address(self._mapping, address)

    def is_in_single_node(self, text: str, case_sensitive: bool = True) -> bool:
        """Return True when text lies entirely within exactly one text node."""
        return self._locator.is_in_single_node(self._mapping, text, case_sensitive)

    def get_text_node(
        self, text: str, case_sensitive: bool = True, preserve_word: bool = False
    ) -> Any | None:
        """Return the first text node containing text, or None."""
        address = self.get_address_for_text(text, case_sensitive, preserve_word)
        if address is None:
            return None
        self._check_fresh("get_text_node")
        return resolve_address(self.root, address, self.adapter)

    def get_node_by_address(self, address: Address) -> Any | None:
        """Return the node at address, or None if it does not resolve.

        Raises:
            InvalidAddressError: If the address is malformed
        """
        self._check_fresh("get_node_by_address")
        return resolve_address(self.root, address, self.adapter)

    def find_all(
        self, text: str, case_sensitive: bool = True, preserve_word: bool = True
    ) -> list[tuple[MappingEntry, list[MatchSpan]]]:
        """Preview every replaceable occurrence of text without changing the tree.

        Returns:
            (entry, spans) for each text node with at least one match, where
            spans use the same boundary rules as replace_text
        """
        return self._locator.find_spans(self._mapping, text, case_sensitive, preserve_word)

    # -------------------------------------------------------------------------
    # Replacement
    # -------------------------------------------------------------------------

    def replace_text(
        self,
        text: str,
        nodes: Any,
        at: Address | None = None,
        preserve_word: bool | None = None,
        replacement_index: int = 0,
        case_sensitive: bool = True,
    ) -> TextMap:
        """Replace one occurrence of text in a single text node with nodes.

        The text node is found by address when ``at`` is given, otherwise it
        is the first mapped text node with a replaceable occurrence. Text
        before and after the occurrence is kept as new text nodes around
        the replacement; everything else in the tree is left alone.

        Args:
            text: Literal text to replace
            nodes: Replacement node, string, or list of nodes/strings
            at: Address of the text node to edit
            preserve_word: Only replace whole words, keeping the boundary
                punctuation around them (default: True)
            replacement_index: Which occurrence within the node to replace
                (0-based; negative counts from the end). In whole-word mode
                each match consumes its boundary characters, so an occurrence
                separated from the previous one by a single boundary character
                is not counted: in "foo foo foo", index 1 is the third "foo"
            case_sensitive: Whether matching is case-sensitive

        Returns:
            self, for chaining; the mapping is stale until remap()

        Raises:
            ValueError: If text is empty
            TextNotFoundError: If the target node does not contain text
            ReplacementIndexError: If replacement_index selects no occurrence
            StaleMappingError: In strict mode, if the mapping is stale
        """
        if not text:
            raise ValueError("Search text must not be empty")
        preserve = True if preserve_word is None else preserve_word
        replacement = list(nodes) if isinstance(nodes, (list, tuple)) else [nodes]

        self._check_fresh("replace_text")
        node, address = self._resolve_target(text, at, preserve, case_sensitive)

        try:
            self._replacer.replace(
                node,
                text,
                replacement,
                preserve_word=preserve,
                case_sensitive=case_sensitive,
                replacement_index=replacement_index,
                address=address,
            )
        except TextNotFoundError as e:
            entries = [MappingEntry(e.node_text or "", address)]
            raise TextNotFoundError(
                text,
                node_text=e.node_text,
                address=address,
                suggestions=SuggestionGenerator.generate_suggestions(
                    text, entries, case_sensitive, preserve
                ),
            ) from e

        self._generation += 1
        logger.debug("Replaced %r at %s (generation %d)", text, address, self._generation)
        return self

    def _resolve_target(
        self, text: str, at: Address | None, preserve_word: bool, case_sensitive: bool
    ) -> tuple[Any, Address]:
        """Find the text node replace_text should edit.

        Raises:
            TextNotFoundError: If no usable text node is found
        """
        if at is not None:
            node = resolve_address(self.root, at, self.adapter)
            if node is None:
                raise TextNotFoundError(
                    text, address=at, hint=f"Address '{at}' does not point at a text node"
                )
            if self.adapter.node_type(node) != self.text_node_type:
                hint = (
                    f"Address '{at}' does not point at a text node "
                    f"(found {self.adapter.describe(node)})"
                )
                raise TextNotFoundError(text, address=at, hint=hint)
            return node, at

        entry = self._locator.entry_for_replacement(
            self._mapping, text, case_sensitive, preserve_word
        )
        if entry is None:
            raise TextNotFoundError(
                text,
                suggestions=SuggestionGenerator.generate_suggestions(
                    text, self._mapping, case_sensitive, preserve_word
                ),
            )

        node = resolve_address(self.root, entry.address, self.adapter)
        if node is None:
            hint = (
                "This text map has no tree to modify"
                if self.root is None
                else "The mapping no longer matches the tree; call remap()"
            )
            raise TextNotFoundError(text, node_text=entry.text, address=entry.address, hint=hint)
        return node, entry.address

    # -------------------------------------------------------------------------
    # Batch edits
    # -------------------------------------------------------------------------

    def apply_edits(
        self, edits: list[dict[str, Any]], stop_on_error: bool = False
    ) -> list[EditResult]:
        """Apply multiple edits in sequence, remapping after each one.

        See BatchOperations.apply_edits for the edit format.
        """
        return self._batch_ops.apply_edits(edits, stop_on_error)

    def apply_edit_file(
        self, path: str | Path, format: str = "yaml", stop_on_error: bool = False
    ) -> list[EditResult]:
        """Apply edits from a YAML or JSON file."""
        return self._batch_ops.apply_edit_file(path, format, stop_on_error)
