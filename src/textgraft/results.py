"""
Result classes for batch edit operations.
"""

from dataclasses import dataclass


@dataclass
class EditResult:
    """Result of applying a single edit operation.

    Attributes:
        success: Whether the edit was applied successfully
        edit_type: Type of edit (e.g., "replace_text")
        message: Human-readable message about the result
        address: Address of the text node that was edited, when known
        error: Optional exception that occurred during the edit
    """

    success: bool
    edit_type: str
    message: str
    address: str | None = None
    error: Exception | None = None

    def __str__(self) -> str:
        """Get string representation of the result."""
        status = "✓" if self.success else "✗"
        return f"{status} {self.edit_type}: {self.message}"
