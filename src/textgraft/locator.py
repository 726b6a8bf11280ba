"""
Text lookup over a mapping, and address resolution against a tree.

Lookups filter mapping entries with a literal (escaped) pattern. A miss is
never an error here: every query returns None (or an empty list) when
nothing matches, and resolve_address returns None when an address walks
off the tree.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .address import Address, decode_address
from .mapper import MappingEntry
from .replacer import MatchSpan, escape_pattern, find_match_spans

if TYPE_CHECKING:
    from .adapters import TreeAdapter

logger = logging.getLogger(__name__)


def resolve_address(root: Any, address: Address, adapter: TreeAdapter) -> Any | None:
    """Walk from root along an address.

    Args:
        root: Root node the address is relative to (None for headless maps)
        address: Address like "0.21.0"; "" is the root itself
        adapter: Adapter for the tree type

    Returns:
        The node at the address, or None if any index is out of range

    Raises:
        InvalidAddressError: If the address is malformed
    """
    if root is None:
        return None

    node = root
    for index in decode_address(address):
        children = adapter.children(node)
        if index >= len(children):
            logger.debug("Address %s does not resolve: no child %d", address, index)
            return None
        node = children[index]
    return node


class TextLocator:
    """Finds mapping entries whose text contains a search string.

    Lookups use regex word boundaries (``\\b``) in whole-word mode. The
    replacement target lookup instead uses the replacer's boundary class, so
    the entry it returns is one the replacer can actually split.
    """

    @staticmethod
    def build_pattern(
        query: str, case_sensitive: bool = True, preserve_word: bool = False
    ) -> re.Pattern[str]:
        """Compile the lookup pattern for a literal query."""
        delimiter = r"\b" if preserve_word else ""
        flags = 0 if case_sensitive else re.IGNORECASE
        return re.compile(f"{delimiter}{escape_pattern(query)}{delimiter}", flags)

    def find_entries(
        self,
        mapping: Iterable[MappingEntry],
        query: str,
        case_sensitive: bool = True,
        preserve_word: bool = False,
    ) -> list[MappingEntry]:
        """Return entries whose text matches query, in mapping order."""
        pattern = self.build_pattern(query, case_sensitive, preserve_word)
        entries = [entry for entry in mapping if pattern.search(entry.text)]
        logger.debug("Found %d entries for %r", len(entries), query)
        return entries

    def address_for_text(
        self,
        mapping: Iterable[MappingEntry],
        query: str,
        case_sensitive: bool = True,
        preserve_word: bool = False,
    ) -> Address | None:
        entries = self.find_entries(mapping, query, case_sensitive, preserve_word)
        return entries[0].address if entries else None

    def addresses_for_text(
        self,
        mapping: Iterable[MappingEntry],
        query: str,
        case_sensitive: bool = True,
        preserve_word: bool = False,
    ) -> list[Address] | None:
        """Return every matching address, or None when nothing matches."""
        entries = self.find_entries(mapping, query, case_sensitive, preserve_word)
        if not entries:
            return None
        return [entry.address for entry in entries]

    def text_by_address(
        self, mapping: Iterable[MappingEntry], address: Address
    ) -> str | None:
        for entry in mapping:
            if entry.address == address:
                return entry.text
        return None

    def is_in_single_node(
        self, mapping: Iterable[MappingEntry], query: str, case_sensitive: bool = True
    ) -> bool:
        """True when exactly one text leaf contains query."""
        return len(self.find_entries(mapping, query, case_sensitive)) == 1

    def find_spans(
        self,
        mapping: Iterable[MappingEntry],
        search: str,
        case_sensitive: bool = True,
        preserve_word: bool = True,
    ) -> list[tuple[MappingEntry, list[MatchSpan]]]:
        """Return every entry with at least one replaceable match, with its spans."""
        results = []
        for entry in mapping:
            spans = find_match_spans(entry.text, search, preserve_word, case_sensitive)
            if spans:
                results.append((entry, spans))
        return results

    def entry_for_replacement(
        self,
        mapping: Iterable[MappingEntry],
        search: str,
        case_sensitive: bool = True,
        preserve_word: bool = True,
    ) -> MappingEntry | None:
        """Return the first entry the replacer could split for search."""
        for entry in mapping:
            if find_match_spans(entry.text, search, preserve_word, case_sensitive):
                return entry
        return None
