"""
Core type definitions for the XSD editing engine.

This module contains fundamental type aliases used throughout the engine for
type safety and consistency.
"""

from typing import Literal

UNBOUNDED = "unbounded"

# One semantic type for occurrence bounds, whatever the enclosing compositor.
Occurs = int | Literal["unbounded"]

AttributeUse = Literal["required", "optional"]

ContentModel = Literal["sequence", "choice", "all"]

WhiteSpaceMode = Literal["preserve", "replace", "collapse"]
