"""
BatchOperations class for handling batch edit operations.

A batch is a list of edit dictionaries applied in order against one
TextMap. Each successful edit is followed by a remap() so the next edit
sees addresses that match the modified tree.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from ..errors import ReplacementIndexError, TextNotFoundError, ValidationError
from ..results import EditResult

if TYPE_CHECKING:
    from ..text_map import TextMap

logger = logging.getLogger(__name__)


class BatchOperations:
    """Handles batch edit operations for a TextMap.

    Example:
        >>> edits = [
        ...     {"type": "replace_text", "find": "foo", "replace": "bar"},
        ...     {"type": "delete_text", "text": "obsolete"},
        ... ]
        >>> results = text_map.apply_edits(edits)
    """

    def __init__(self, text_map: TextMap) -> None:
        """Initialize BatchOperations with a TextMap reference.

        Args:
            text_map: The TextMap instance to operate on
        """
        self._text_map = text_map

    def apply_edits(
        self, edits: list[dict[str, Any]], stop_on_error: bool = False
    ) -> list[EditResult]:
        """Apply multiple edits in sequence.

        Args:
            edits: List of edit dictionaries with keys:
                - type: Edit operation ("replace_text" or "delete_text")
                - Other parameters specific to the edit type
            stop_on_error: If True, stop processing on first error

        Returns:
            List of EditResult objects, one per edit

        Edit parameters:
            replace_text: find, replace (string, node, or list of them),
                and optionally at, preserve_word, replacement_index,
                case_sensitive
            delete_text: text, and the same optional keys
        """
        results = []

        for i, edit in enumerate(edits):
            edit_type = edit.get("type") if isinstance(edit, dict) else None
            if not edit_type:
                results.append(
                    EditResult(
                        success=False,
                        edit_type="unknown",
                        message=f"Edit {i}: Missing 'type' field",
                        error=ValidationError("Missing 'type' field"),
                    )
                )
                if stop_on_error:
                    break
                continue

            result = self._apply_single_edit(edit_type, edit)
            results.append(result)
            if not result.success and stop_on_error:
                break

        applied = sum(1 for r in results if r.success)
        logger.debug("Applied %d of %d edits", applied, len(edits))
        return results

    def _apply_single_edit(self, edit_type: str, edit: dict[str, Any]) -> EditResult:
        """Apply a single edit operation.

        Args:
            edit_type: The type of edit to perform
            edit: Dictionary with edit parameters

        Returns:
            EditResult indicating success or failure
        """
        handlers = {
            "replace_text": self._handle_replace_text,
            "delete_text": self._handle_delete_text,
        }

        handler = handlers.get(edit_type)
        if handler is None:
            return EditResult(
                success=False,
                edit_type=edit_type,
                message=f"Unknown edit type: {edit_type}",
                error=ValidationError(f"Unknown edit type: {edit_type}"),
            )

        try:
            return handler(edit_type, edit)
        except TextNotFoundError as e:
            return EditResult(
                success=False,
                edit_type=edit_type,
                message=f"Text not found: {e}",
                address=e.address,
                error=e,
            )
        except ReplacementIndexError as e:
            return EditResult(
                success=False,
                edit_type=edit_type,
                message=f"No such occurrence: {e}",
                error=e,
            )
        except (ValueError, TypeError) as e:
            return EditResult(
                success=False, edit_type=edit_type, message=f"Error: {str(e)}", error=e
            )

    def _replace(
        self, edit_type: str, edit: dict[str, Any], text: str, nodes: Any
    ) -> EditResult:
        at = edit.get("at")
        preserve_word = edit.get("preserve_word")
        case_sensitive = edit.get("case_sensitive", True)

        address = at
        if address is None:
            matches = self._text_map.find_all(
                text, case_sensitive, True if preserve_word is None else preserve_word
            )
            address = matches[0][0].address if matches else None

        self._text_map.replace_text(
            text,
            nodes,
            at=at,
            preserve_word=preserve_word,
            replacement_index=edit.get("replacement_index", 0),
            case_sensitive=case_sensitive,
        ).remap()
        return EditResult(
            success=True,
            edit_type=edit_type,
            message=self._describe(edit_type, text, nodes),
            address=address,
        )

    def _handle_replace_text(self, edit_type: str, edit: dict[str, Any]) -> EditResult:
        """Handle replace_text edit type."""
        find = edit.get("find")
        replacement = edit.get("replace")

        if not find or replacement is None:
            return EditResult(
                success=False,
                edit_type=edit_type,
                message="Missing required parameter: 'find' or 'replace'",
                error=ValidationError("Missing required parameter"),
            )

        return self._replace(edit_type, edit, find, replacement)

    def _handle_delete_text(self, edit_type: str, edit: dict[str, Any]) -> EditResult:
        """Handle delete_text edit type."""
        text = edit.get("text")

        if not text:
            return EditResult(
                success=False,
                edit_type=edit_type,
                message="Missing required parameter: 'text'",
                error=ValidationError("Missing required parameter"),
            )

        return self._replace(edit_type, edit, text, [])

    @staticmethod
    def _describe(edit_type: str, text: str, nodes: Any) -> str:
        if edit_type == "delete_text":
            return f"Deleted '{text}'"
        if isinstance(nodes, str):
            return f"Replaced '{text}' with '{nodes}'"
        count = len(nodes) if isinstance(nodes, (list, tuple)) else 1
        return f"Replaced '{text}' with {count} node{'s' if count != 1 else ''}"

    def apply_edit_file(
        self, path: str | Path, format: str = "yaml", stop_on_error: bool = False
    ) -> list[EditResult]:
        """Apply edits from a YAML or JSON file.

        The file should contain an 'edits' key with a list of edit dictionaries.

        Args:
            path: Path to the edits file
            format: File format - "yaml" or "json" (default: "yaml")
            stop_on_error: If True, stop processing on first error

        Returns:
            List of EditResult objects, one per edit

        Raises:
            ValidationError: If file cannot be parsed or has invalid format
            FileNotFoundError: If file does not exist

        Example YAML file:
            ```yaml
            edits:
              - type: replace_text
                find: "toucans"
                replace: "hermosa toucans"
              - type: delete_text
                text: "medium-sized"
            ```
        """
        file_path = Path(path)

        if not file_path.exists():
            raise FileNotFoundError(f"Edit file not found: {path}")

        try:
            with open(file_path, encoding="utf-8") as f:
                if format == "yaml":
                    data = yaml.safe_load(f)
                elif format == "json":
                    data = json.load(f)
                else:
                    raise ValidationError(f"Unsupported format: {format}")
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML in {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValidationError("Edit file must contain a dictionary/object")

        if "edits" not in data:
            raise ValidationError("Edit file must contain an 'edits' key")

        edits = data["edits"]
        if not isinstance(edits, list):
            raise ValidationError("'edits' must be a list")

        return self.apply_edits(edits, stop_on_error)
