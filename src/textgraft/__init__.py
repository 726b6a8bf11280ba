"""
textgraft - Find text in a node tree and replace it in place.

This package maps every text leaf of a tree (an in-memory Node tree, an
HTML fragment, or an lxml XML document) to a dot-separated address and
replaces occurrences of text inside a single leaf with new nodes, keeping
the surrounding text and punctuation intact.

Example:
    >>> from textgraft import Node, TextMap
    >>> text_map = TextMap.from_html("<p>foo bar or foo bar</p>")
    >>> text_map.replace_text("foo bar", Node.text_node("baz qux"), replacement_index=1).remap()
    >>> text_map.get_text()
    'foo bar or baz qux'
"""

__version__ = "0.1.0"
__all__ = [
    "TextMap",
    "Node",
    "TreeAdapter",
    "NodeAdapter",
    "ElementAdapter",
    "adapter_for",
    "parse_tag",
    "Address",
    "encode_address",
    "decode_address",
    "MappingEntry",
    "MappingSnapshot",
    "build_mapping",
    "TextLocator",
    "resolve_address",
    "MatchSpan",
    "TextReplacer",
    "escape_pattern",
    "find_match_spans",
    "split_around_match",
    "EditResult",
    "SuggestionGenerator",
    "TextGraftError",
    "TextNotFoundError",
    "ReplacementIndexError",
    "InvalidAddressError",
    "StaleMappingError",
    "StaleMappingWarning",
    "ValidationError",
]

# Import tree adapters
from .adapters import ElementAdapter, NodeAdapter, TreeAdapter, adapter_for, parse_tag

# Import address codec
from .address import Address, decode_address, encode_address
from .errors import (
    InvalidAddressError,
    ReplacementIndexError,
    StaleMappingError,
    StaleMappingWarning,
    TextGraftError,
    TextNotFoundError,
    ValidationError,
)

# Import lookup and mapping
from .locator import TextLocator, resolve_address
from .mapper import MappingEntry, MappingSnapshot, build_mapping

# Import model classes
from .models.node import Node

# Import replacement
from .replacer import MatchSpan, TextReplacer, escape_pattern, find_match_spans, split_around_match

# Import result types
from .results import EditResult

# Import suggestion generator
from .suggestions import SuggestionGenerator

# Import the main entry point
from .text_map import TextMap
