"""
In-memory node tree for headless use.

Node mirrors the small part of the DOM that text mapping needs: a type
marker, ordered children, a text payload for text leaves and a parent link
for in-place replacement. HTML and XML are read through lxml and converted
so that text and tail strings become their own text nodes, giving the same
child indices a browser DOM would.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from textgraft.constants import COMMENT_NODE_TYPE, TEXT_NODE_TYPE


@dataclass(eq=False)
class Node:
    """A typed tree node.

    Attributes:
        node_type: "#text" for text leaves, "#comment" for comments, the tag
            name for elements
        text: Text payload (text and comment nodes only)
        children: Ordered child nodes
        attributes: Element attributes, kept for serialization
        parent: Parent node, None for a root or a detached node
    """

    node_type: str
    text: str | None = None
    children: list[Node] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)
    parent: Node | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for child in self.children:
            child.parent = self

    @classmethod
    def text_node(cls, text: str) -> Node:
        """Create a text leaf."""
        return cls(TEXT_NODE_TYPE, text=text)

    @classmethod
    def element(cls, tag: str, *children: Node | str, **attributes: str) -> Node:
        """Create an element, wrapping string children in text nodes.

        Example:
            >>> p = Node.element("p", "all the ", Node.element("b", "foo"))
            >>> p.text_content
            'all the foo'
        """
        nodes = [cls.text_node(c) if isinstance(c, str) else c for c in children]
        return cls(tag, children=nodes, attributes=dict(attributes))

    @property
    def is_text(self) -> bool:
        return self.node_type == TEXT_NODE_TYPE

    @property
    def text_content(self) -> str:
        """Concatenated text of this node and its descendants."""
        if self.is_text:
            return self.text or ""
        if self.node_type == COMMENT_NODE_TYPE:
            return ""
        return "".join(child.text_content for child in self.children)

    @property
    def index(self) -> int | None:
        """Position of this node in its parent's children."""
        if self.parent is None:
            return None
        for i, sibling in enumerate(self.parent.children):
            if sibling is self:
                return i
        return None

    @property
    def previous_sibling(self) -> Node | None:
        i = self.index
        if i is None or i == 0:
            return None
        return self.parent.children[i - 1]

    @property
    def next_sibling(self) -> Node | None:
        i = self.index
        if i is None or i + 1 >= len(self.parent.children):
            return None
        return self.parent.children[i + 1]

    def append_child(self, child: Node) -> Node:
        """Append child, detaching it from any previous parent."""
        child.detach()
        child.parent = self
        self.children.append(child)
        return child

    def detach(self) -> None:
        """Remove this node from its parent."""
        i = self.index
        if i is not None:
            del self.parent.children[i]
        self.parent = None

    def replace_with(self, *nodes: Node) -> None:
        """Replace this node in its parent with nodes, keeping sibling order.

        Raises:
            ValueError: If this node has no parent
        """
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a node that has no parent")

        for node in nodes:
            if node is not self:
                node.detach()
        # Detaching earlier siblings shifts our position
        i = self.index
        parent.children[i : i + 1] = list(nodes)
        if not any(node is self for node in nodes):
            self.parent = None
        for node in nodes:
            node.parent = parent

    # -------------------------------------------------------------------------
    # lxml conversion
    # -------------------------------------------------------------------------

    @classmethod
    def from_element(cls, element: Any) -> Node:
        """Convert an lxml element into a Node tree.

        The element's ``text`` becomes a leading text child and each child's
        ``tail`` becomes a text node after it. The element's own tail is not
        part of the result.
        """
        if element.tag is etree.Comment:
            return cls(COMMENT_NODE_TYPE, text=element.text or "")
        if not isinstance(element.tag, str):
            # Processing instructions and entities have no text to map
            return cls(COMMENT_NODE_TYPE, text="")

        node = cls(element.tag, attributes=dict(element.attrib))
        if element.text:
            node.append_child(cls.text_node(element.text))
        for child in element:
            node.append_child(cls.from_element(child))
            if child.tail:
                node.append_child(cls.text_node(child.tail))
        return node

    @classmethod
    def from_html(cls, markup: str, container: str = "div") -> Node:
        """Parse an HTML fragment into a Node tree under a container element.

        Args:
            markup: HTML fragment, e.g. "<p>all the foo people</p>"
            container: Tag of the wrapping root element

        Returns:
            The container node; its children are the fragment's top-level nodes
        """
        root = lxml_html.fragment_fromstring(markup, create_parent=container)
        return cls.from_element(root)

    def to_element(self) -> Any:
        """Convert this element node back into an lxml element.

        Raises:
            ValueError: If called on a text or comment node
        """
        if self.is_text or self.node_type == COMMENT_NODE_TYPE:
            raise ValueError(f"Cannot convert a {self.node_type} node to an element")

        element = etree.Element(self.node_type, self.attributes)
        last = None
        for child in self.children:
            if child.is_text:
                if last is None:
                    element.text = (element.text or "") + (child.text or "")
                else:
                    last.tail = (last.tail or "") + (child.text or "")
                continue
            if child.node_type == COMMENT_NODE_TYPE:
                last = etree.Comment(child.text or "")
            else:
                last = child.to_element()
            element.append(last)
        return element

    def to_html(self, include_container: bool = False) -> str:
        """Serialize to HTML.

        Args:
            include_container: Include this node's own tag; by default only
                its contents are serialized (like innerHTML)
        """
        element = self.to_element()
        markup = lxml_html.tostring(element, encoding="unicode")
        if include_container:
            return markup
        start = markup.index(">") + 1
        end = markup.rindex("</")
        return markup[start:end]
