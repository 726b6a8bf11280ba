"""
Model classes for trees that text can be mapped over.
"""

from textgraft.models.node import Node

__all__ = ["Node"]
