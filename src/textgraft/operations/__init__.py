"""
Operations modules for TextMap.

This package contains operation classes that TextMap delegates to.
"""

from .batch import BatchOperations

__all__ = ["BatchOperations"]
