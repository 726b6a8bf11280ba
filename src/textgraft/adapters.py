"""
Tree adapters: the capability set text mapping needs from a host tree.

The mapper, locator and replacer never touch a concrete tree type. They go
through a TreeAdapter, which answers "what type is this node", "what are its
children", "what text does it carry", and performs the single structural
mutation replacement needs: put an ordered list of nodes where one node was.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from lxml import etree

from .constants import (
    CONTEXT_CHARS_DEFAULT,
    DEFAULT_TEXT_TAG,
    NSMAP,
    TEXT_NODE_TYPE,
    XML_NAMESPACE,
)
from .models.node import Node

logger = logging.getLogger(__name__)


class TreeAdapter(Protocol):
    """Minimal interface over a host tree."""

    text_node_type: Any

    def node_type(self, node: Any) -> Any: ...

    def children(self, node: Any) -> Sequence[Any]: ...

    def text(self, node: Any) -> str: ...

    def replace_with(self, node: Any, nodes: Sequence[Any]) -> None: ...

    def create_text_node(self, text: str) -> Any: ...

    def describe(self, node: Any) -> str: ...


def _excerpt(text: str, limit: int = CONTEXT_CHARS_DEFAULT) -> str:
    if len(text) <= limit:
        return repr(text)
    return repr(text[: limit - 3] + "...")


class NodeAdapter:
    """Adapter for the in-memory Node tree."""

    text_node_type = TEXT_NODE_TYPE

    def node_type(self, node: Node) -> str:
        return node.node_type

    def children(self, node: Node) -> Sequence[Node]:
        return node.children

    def text(self, node: Node) -> str:
        return node.text or ""

    def replace_with(self, node: Node, nodes: Sequence[Node]) -> None:
        node.replace_with(*nodes)

    def create_text_node(self, text: str) -> Node:
        return Node.text_node(text)

    def describe(self, node: Node) -> str:
        if node.is_text:
            return f"text node {_excerpt(node.text or '')}"
        return f"<{node.node_type}> node"


def parse_tag(tag: str, nsmap: dict[str, str] | None = None) -> str:
    """Parse a tag name into a fully qualified namespace tag.

    Args:
        tag: Tag name like "w:t", "{namespace}t" or "span"
        nsmap: Prefix to namespace map (defaults to NSMAP)

    Returns:
        Fully qualified tag like "{namespace}t"; unprefixed tags are
        returned unchanged

    Raises:
        ValueError: If the prefix is not in the namespace map
    """
    if tag.startswith("{") or ":" not in tag:
        return tag
    prefix, local = tag.split(":", 1)
    namespaces = nsmap if nsmap is not None else NSMAP
    if prefix not in namespaces:
        raise ValueError(f"Unknown namespace prefix '{prefix}' in tag '{tag}'")
    return f"{{{namespaces[prefix]}}}{local}"


class ElementAdapter:
    """Adapter for lxml element trees whose text lives in dedicated elements.

    Text leaves are elements with the configured tag (WordprocessingML
    ``w:t`` by default); their ``.text`` is the payload. Mixed content
    (text and tail strings on arbitrary elements) is not mapped here; read
    such documents through Node.from_element instead.

    Example:
        >>> adapter = ElementAdapter("w:t")
        >>> adapter.text_node_type
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}t'
    """

    def __init__(
        self, text_tag: str = DEFAULT_TEXT_TAG, nsmap: dict[str, str] | None = None
    ) -> None:
        self.nsmap = {**NSMAP, **(nsmap or {})}
        self.text_node_type = parse_tag(text_tag, self.nsmap)

    def node_type(self, node: etree._Element) -> Any:
        return node.tag

    def children(self, node: etree._Element) -> Sequence[etree._Element]:
        return list(node)

    def text(self, node: etree._Element) -> str:
        return node.text or ""

    def replace_with(self, node: etree._Element, nodes: Sequence[etree._Element]) -> None:
        """Replace node with nodes, keeping its tail text in place.

        Raises:
            ValueError: If node is the document root
        """
        parent = node.getparent()
        if parent is None:
            raise ValueError("Cannot replace the root element")

        index = parent.index(node)
        tail = node.tail
        # lxml removes the tail together with the element
        parent.remove(node)
        for offset, new_node in enumerate(nodes):
            parent.insert(index + offset, new_node)
        logger.debug("Replaced element at index %d with %d element(s)", index, len(nodes))

        if not tail:
            return
        if nodes:
            last = nodes[-1]
            last.tail = (last.tail or "") + tail
        elif index > 0:
            previous = parent[index - 1]
            previous.tail = (previous.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail

    def create_text_node(self, text: str) -> etree._Element:
        element = etree.Element(self.text_node_type)
        # Preserve whitespace if needed
        if text and (text[0].isspace() or text[-1].isspace()):
            element.set(f"{{{XML_NAMESPACE}}}space", "preserve")
        element.text = text
        return element

    def describe(self, node: etree._Element) -> str:
        name = etree.QName(node).localname if isinstance(node.tag, str) else "comment"
        if node.tag == self.text_node_type:
            return f"<{name}> element {_excerpt(node.text or '')}"
        return f"<{name}> element"


def adapter_for(root: Any, text_node_type: Any = None) -> TreeAdapter:
    """Pick an adapter for a root node.

    Args:
        root: A Node or an lxml element
        text_node_type: Text tag for lxml trees (ignored for Node trees)

    Raises:
        TypeError: If the root type is not recognized
    """
    if isinstance(root, Node):
        return NodeAdapter()
    if isinstance(root, etree._Element):
        if text_node_type is None:
            return ElementAdapter()
        return ElementAdapter(text_node_type)
    raise TypeError(
        f"No tree adapter for {type(root).__name__}; pass adapter= explicitly"
    )
