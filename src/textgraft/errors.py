"""
Custom exception classes for the textgraft package.

These exceptions separate "nothing matched" (a normal None result from the
query operations) from "a match was required and could not be applied",
which is what the classes below signal.
"""


class TextGraftError(Exception):
    """Base exception for all textgraft errors."""

    pass


class TextNotFoundError(TextGraftError):
    """Raised when replacement text cannot be found in the target node.

    Attributes:
        text: The text that was being searched for
        node_text: Text of the node that was searched (None if no node resolved)
        address: Address of the node that was searched, when known
        suggestions: List of helpful suggestions for resolving the issue
        hint: Additional context about why the text wasn't found
    """

    def __init__(
        self,
        text: str,
        node_text: str | None = None,
        address: str | None = None,
        suggestions: list[str] | None = None,
        hint: str | None = None,
    ) -> None:
        self.text = text
        self.node_text = node_text
        self.address = address
        self.suggestions = suggestions or []
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format a helpful error message with suggestions."""
        msg = f"Could not find '{self.text}' in {self._describe_node()}"

        if self.hint:
            msg += f"\n\nNote: {self.hint}"

        if self.suggestions:
            msg += "\n\nSuggestions:\n"
            for suggestion in self.suggestions:
                msg += f"  • {suggestion}\n"

        return msg

    def _describe_node(self) -> str:
        if self.node_text is None:
            if self.address:
                return f"node at '{self.address}'"
            return "unknown node"
        if self.address:
            return f"text node at '{self.address}' ({self.node_text!r})"
        return f"text node {self.node_text!r}"


class ReplacementIndexError(TextGraftError, IndexError):
    """Raised when replacement_index selects a match that does not exist.

    Attributes:
        text: The text that was being replaced
        index: The requested replacement index
        count: Number of matches available in the node
    """

    def __init__(self, text: str, index: int, count: int) -> None:
        self.text = text
        self.index = index
        self.count = count
        super().__init__(
            f"replacement_index {index} is out of range for '{text}': "
            f"node has {count} match{'es' if count != 1 else ''}"
        )


class InvalidAddressError(TextGraftError, ValueError):
    """Raised when an address string cannot be decoded.

    Attributes:
        address: The address that failed to decode
        reason: Explanation of what was wrong with it
    """

    def __init__(self, address: str, reason: str | None = None) -> None:
        self.address = address
        self.reason = reason
        msg = f"Invalid address '{address}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StaleMappingError(TextGraftError):
    """Raised in strict mode when a mapping is used after the tree changed.

    Attributes:
        generation: Generation the mapping was built at
        current: Current generation of the text map
    """

    def __init__(self, generation: int, current: int) -> None:
        self.generation = generation
        self.current = current
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Mapping from generation {self.generation} is stale (tree is at {self.current})"
        msg += "\n\nThe tree has been modified. Call remap() before using addresses again."
        return msg


class StaleMappingWarning(UserWarning):
    """Warning emitted when a stale mapping is used outside strict mode."""


class ValidationError(TextGraftError):
    """Raised when batch edit input is malformed.

    Attributes:
        errors: List of specific validation error messages (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

