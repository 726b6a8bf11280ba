"""
Text mapping: where each run of leaf text lives in the tree.

A mapping is the ordered list of (text, address) pairs for every text leaf
under a root, built by a depth-first, pre-order walk. Entry order is the
reading order of the tree's text, so joining the entries' text gives the
tree's visible text with all markup stripped.

Example:
    >>> root = Node.from_html("<p>all the <b>foo</b> people</p>")
    >>> build_mapping(root, NodeAdapter())
    [MappingEntry(text='all the ', address='0.0'), MappingEntry(text='foo', address='0.1.0'),
     MappingEntry(text=' people', address='0.2')]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

from .address import Address, encode_address

if TYPE_CHECKING:
    from .adapters import TreeAdapter

logger = logging.getLogger(__name__)


class MappingEntry(NamedTuple):
    """One text leaf: its text and its address."""

    text: str
    address: Address


def build_mapping(
    root: Any, adapter: TreeAdapter, text_node_type: Any = None
) -> list[MappingEntry]:
    """Map every text leaf under root to its address.

    Args:
        root: Root node; only its descendants are mapped
        adapter: Adapter for the tree type
        text_node_type: Marker for text leaves (defaults to the adapter's)

    Returns:
        Entries in depth-first, pre-order traversal order
    """
    marker = adapter.text_node_type if text_node_type is None else text_node_type
    entries = list(_walk(root, adapter, marker, ()))
    logger.debug("Built mapping with %d text entries", len(entries))
    return entries


def _walk(
    parent: Any, adapter: TreeAdapter, marker: Any, path: tuple[int, ...]
) -> Iterator[MappingEntry]:
    for i, child in enumerate(adapter.children(parent)):
        child_path = path + (i,)
        if adapter.node_type(child) == marker:
            yield MappingEntry(adapter.text(child), encode_address(child_path))
        elif adapter.children(child):
            yield from _walk(child, adapter, marker, child_path)


@dataclass(frozen=True)
class MappingSnapshot:
    """An immutable mapping tied to the tree generation it was built at.

    Attributes:
        entries: Mapping entries in traversal order
        generation: Generation of the owning TextMap when this was taken
    """

    entries: tuple[MappingEntry, ...]
    generation: int = 0

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[Sequence[str]], generation: int = 0
    ) -> MappingSnapshot:
        """Build a snapshot from (text, address) pairs.

        Accepts MappingEntry objects as well as plain two-item lists, so a
        mapping saved as JSON can be loaded back.

        Raises:
            ValueError: If a pair is a string or does not have exactly two items
        """
        entries = []
        for pair in pairs:
            if isinstance(pair, str) or len(pair) != 2:
                raise ValueError(f"Mapping entry must be (text, address), got {pair!r}")
            text, address = pair
            entries.append(MappingEntry(str(text), str(address)))
        return cls(tuple(entries), generation)

    @property
    def text(self) -> str:
        """Visible text: all entries' text joined in order."""
        return "".join(entry.text for entry in self.entries)

    def find_by_address(self, address: Address) -> MappingEntry | None:
        for entry in self.entries:
            if entry.address == address:
                return entry
        return None

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> MappingEntry:
        return self.entries[index]
