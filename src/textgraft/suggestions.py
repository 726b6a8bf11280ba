"""
Suggestion generation for helpful error messages.

This module provides suggestions when replacement text cannot be found,
pointing at the usual causes: the text spans several text nodes, differs
only in capitalization, or occurs only inside a longer word.
"""

from collections.abc import Iterable

from .mapper import MappingEntry
from .replacer import find_match_spans


class SuggestionGenerator:
    """Generates helpful suggestions when text cannot be found."""

    @staticmethod
    def generate_suggestions(
        text: str,
        entries: Iterable[MappingEntry],
        case_sensitive: bool = True,
        preserve_word: bool = True,
    ) -> list[str]:
        """Generate helpful suggestions when text is not found.

        Args:
            text: The text that was searched for
            entries: Mapping entries that were searched
            case_sensitive: Whether the failed search was case-sensitive
            preserve_word: Whether the failed search was whole-word only

        Returns:
            List of suggestion strings
        """
        entries = list(entries)
        suggestions = []

        in_single_node = any(text in entry.text for entry in entries)
        full_text = "".join(entry.text for entry in entries)
        if not in_single_node and text in full_text:
            suggestions.append(
                "Text spans more than one text node. "
                "Replace a shorter piece that lies within a single node"
            )

        if case_sensitive and any(
            find_match_spans(entry.text, text, preserve_word, case_sensitive=False)
            for entry in entries
        ):
            suggestions.append(
                "Text found with case-insensitive search. "
                "Check capitalization or pass case_sensitive=False"
            )

        if preserve_word and in_single_node:
            suggestions.append(
                "Text only occurs inside a longer word. "
                "Pass preserve_word=False to replace fragments"
            )

        # Check for double spaces
        if "  " in text:
            suggestions.append(
                "Search text contains double spaces. "
                "The tree may have single spaces - try removing extra spaces"
            )

        # Check for leading/trailing whitespace
        if text != text.strip():
            stripped = text.strip()
            suggestions.append(f'Search text has leading/trailing whitespace. Try: "{stripped}"')

        if not suggestions:
            suggestions.extend(
                [
                    "Check for typos in the search text",
                    "Call remap() if the tree changed since the mapping was built",
                ]
            )

        return suggestions
