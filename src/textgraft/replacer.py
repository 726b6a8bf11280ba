"""
Text replacement inside a single text leaf.

This module handles the core algorithm for swapping one occurrence of a
search string for caller-supplied nodes while leaving everything else in
the leaf untouched:

1. Scan the leaf's text for every match span. In whole-word mode a match
   must be preceded by the start of the text or a boundary character and
   followed by the end of the text or a boundary character; that boundary
   character is consumed into the match and recorded as ``lead``/``trail``.
2. Pick the span at ``replacement_index``.
3. Rebuild the text before and after the picked span. Every other span is
   carried over with its boundary characters, so repeated occurrences of
   the search text (and the punctuation between them) survive verbatim.
4. Substitute the leaf with [prefix text, *replacement nodes, suffix text],
   dropping empty text pieces.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .constants import WORD_BOUNDARY_CLASS
from .errors import ReplacementIndexError, TextNotFoundError

if TYPE_CHECKING:
    from .adapters import TreeAdapter

logger = logging.getLogger(__name__)


def escape_pattern(text: str) -> str:
    """Escape regex metacharacters so text matches literally."""
    return re.escape(text) if text else ""


def build_search_pattern(
    search: str, preserve_word: bool = True, case_sensitive: bool = True
) -> re.Pattern[str]:
    """Compile the boundary-aware pattern used for replacement.

    The pattern always has three named groups: ``lead`` and ``trail`` hold
    the consumed boundary characters (empty at the start/end of the text
    or when preserve_word is False) and ``core`` holds the literal match.

    Args:
        search: Literal text to find
        preserve_word: Only match whole words delimited by boundary characters
        case_sensitive: Whether matching is case-sensitive
    """
    core = escape_pattern(search)
    if preserve_word:
        pattern = (
            rf"(?P<lead>\A|{WORD_BOUNDARY_CLASS})"
            rf"(?P<core>{core})"
            rf"(?P<trail>\Z|{WORD_BOUNDARY_CLASS})"
        )
    else:
        pattern = rf"(?P<lead>)(?P<core>{core})(?P<trail>)"
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


@dataclass(frozen=True)
class MatchSpan:
    """One occurrence of the search text in a leaf.

    Attributes:
        start: Offset where the match starts, including a leading boundary char
        end: Offset where the match ends (exclusive), including a trailing one
        text: The matched substring, text[start:end]
        lead: Leading boundary character, or "" if none was consumed
        trail: Trailing boundary character, or "" if none was consumed
    """

    start: int
    end: int
    text: str
    lead: str = ""
    trail: str = ""

    @property
    def core_start(self) -> int:
        """Offset of the search text itself."""
        return self.start + len(self.lead)

    @property
    def core_end(self) -> int:
        return self.end - len(self.trail)

    @property
    def core(self) -> str:
        """The matched search text without boundary characters."""
        return self.text[len(self.lead) : len(self.text) - len(self.trail)]


def find_match_spans(
    text: str, search: str, preserve_word: bool = True, case_sensitive: bool = True
) -> list[MatchSpan]:
    """Find every non-overlapping match of search in text, left to right.

    Boundary characters are consumed, so in whole-word mode two occurrences
    separated by a single space yield only the first: the space belongs to
    the first match's trail.

    Example:
        >>> [s.text for s in find_match_spans("foo-bar, foo", "foo")]
        ['foo-', ' foo']
    """
    if not search:
        return []

    pattern = build_search_pattern(search, preserve_word, case_sensitive)
    return [
        MatchSpan(
            start=match.start(),
            end=match.end(),
            text=match.group(0),
            lead=match.group("lead"),
            trail=match.group("trail"),
        )
        for match in pattern.finditer(text)
    ]


def select_span(spans: Sequence[MatchSpan], index: int, search: str) -> int:
    """Resolve index to a position in spans; negative indexes count from the end.

    Raises:
        ReplacementIndexError: If index is outside the available spans
    """
    position = index + len(spans) if index < 0 else index
    if not 0 <= position < len(spans):
        raise ReplacementIndexError(search, index, len(spans))
    return position


def split_around_match(text: str, spans: Sequence[MatchSpan], index: int) -> tuple[str, str]:
    """Split text into the pieces before and after one match.

    Spans are non-overlapping and ordered, so rebuilding the prefix from the
    content segments and earlier matches (each with its own boundary
    characters) reproduces text up to the selected match exactly. The
    selected match's lead is appended to the prefix and its trail is
    prepended to the suffix.

    Args:
        text: The leaf text the spans were found in
        spans: All match spans, from find_match_spans
        index: Position of the selected span in spans

    Returns:
        Tuple of (prefix, suffix)
    """
    selected = spans[index]

    prefix_parts = []
    cursor = 0
    for span in spans[:index]:
        prefix_parts.append(text[cursor : span.start])
        prefix_parts.append(span.text)
        cursor = span.end
    prefix_parts.append(text[cursor : selected.start])
    prefix_parts.append(selected.lead)

    suffix_parts = [selected.trail]
    cursor = selected.end
    for span in spans[index + 1 :]:
        suffix_parts.append(text[cursor : span.start])
        suffix_parts.append(span.text)
        cursor = span.end
    suffix_parts.append(text[cursor:])

    return "".join(prefix_parts), "".join(suffix_parts)


class TextReplacer:
    """Replaces one occurrence of text inside a text leaf with new nodes.

    Args:
        adapter: Adapter for the tree the leaf belongs to
        create_text_node: Factory for text nodes (defaults to the adapter's)

    Example:
        >>> replacer = TextReplacer(NodeAdapter())
        >>> leaf = root.children[0].children[0]     # "all the foo people"
        >>> replacer.replace(leaf, "foo", [Node.element("b", "bar")])
    """

    def __init__(
        self,
        adapter: TreeAdapter,
        create_text_node: Callable[[str], Any] | None = None,
    ) -> None:
        self.adapter = adapter
        self.create_text_node = create_text_node or adapter.create_text_node

    def build_nodes(
        self,
        text: str,
        search: str,
        replacement_nodes: Sequence[Any],
        preserve_word: bool = True,
        case_sensitive: bool = True,
        replacement_index: int = 0,
        address: str | None = None,
    ) -> list[Any]:
        """Compute the node list that replaces a leaf, without mutating anything.

        Args:
            text: Full text of the leaf
            search: Literal text to replace
            replacement_nodes: Nodes (or raw strings) to splice in for the match
            preserve_word: Only replace whole-word occurrences
            case_sensitive: Whether matching is case-sensitive
            replacement_index: Which occurrence to replace (0-based)
            address: Address of the leaf, used in error messages

        Returns:
            [prefix text node, *replacement nodes, suffix text node] with
            empty text pieces omitted

        Raises:
            ValueError: If search is empty
            TextNotFoundError: If search does not occur in text
            ReplacementIndexError: If replacement_index selects no match
        """
        if not search:
            raise ValueError("Search text must not be empty")

        spans = find_match_spans(text, search, preserve_word, case_sensitive)
        if not spans:
            raise TextNotFoundError(search, node_text=text, address=address)

        position = select_span(spans, replacement_index, search)
        prefix, suffix = split_around_match(text, spans, position)
        logger.debug(
            "Replacing match %d of %d for %r (prefix=%r, suffix=%r)",
            position + 1,
            len(spans),
            search,
            prefix,
            suffix,
        )

        nodes = []
        if prefix:
            nodes.append(self.create_text_node(prefix))
        for node in replacement_nodes:
            if isinstance(node, str):
                if node:
                    nodes.append(self.create_text_node(node))
            else:
                nodes.append(node)
        if suffix:
            nodes.append(self.create_text_node(suffix))
        return nodes

    def replace(
        self,
        node: Any,
        search: str,
        replacement_nodes: Sequence[Any],
        preserve_word: bool = True,
        case_sensitive: bool = True,
        replacement_index: int = 0,
        address: str | None = None,
    ) -> list[Any]:
        """Replace one occurrence of search in a text leaf.

        The leaf is substituted in a single structural change; if the text
        is not found nothing in the tree is touched.

        Returns:
            The nodes now occupying the leaf's former position
        """
        nodes = self.build_nodes(
            self.adapter.text(node),
            search,
            replacement_nodes,
            preserve_word=preserve_word,
            case_sensitive=case_sensitive,
            replacement_index=replacement_index,
            address=address,
        )
        self.adapter.replace_with(node, nodes)
        return nodes
