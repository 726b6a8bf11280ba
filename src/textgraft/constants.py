"""
Centralized constants for addresses, word boundaries and XML namespaces.

Import from here rather than re-declaring values so the locator, the
replacer and the adapters agree on the same boundary class and tags.
"""

# =============================================================================
# Addresses
# =============================================================================

# Separator between child indices in an address ("0.21.0")
ADDRESS_SEPARATOR = "."


# =============================================================================
# Word Boundaries
# =============================================================================

# Characters that delimit a whole word during replacement. Each entry is a
# regex character-class fragment, so "-" is escaped and whitespace is \s.
WORD_BOUNDARY_CHARS = (".", "!", "?", "'", '"', r"\-", ",", r"\s")

# Character class built from WORD_BOUNDARY_CHARS
WORD_BOUNDARY_CLASS = "[" + "".join(WORD_BOUNDARY_CHARS) + "]"


# =============================================================================
# Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# XML namespace (xml:space)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Prefixes understood when a text tag is given as "prefix:local"
NSMAP = {"w": WORD_NAMESPACE}


# =============================================================================
# Defaults
# =============================================================================

# Marker for text leaves in the in-memory Node tree (matches the DOM nodeName)
TEXT_NODE_TYPE = "#text"

# Marker for comment nodes in the in-memory Node tree
COMMENT_NODE_TYPE = "#comment"

# Default text-leaf tag for lxml element trees
DEFAULT_TEXT_TAG = "w:t"

# Characters of leaf text shown around a description in error messages
CONTEXT_CHARS_DEFAULT = 40
