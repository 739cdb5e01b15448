"""
Address resolution against the schema tree.
"""

from xsdedit.navigation.navigator import (
    ChildLocation,
    Navigator,
    NodeLocation,
    kind_of,
    navigator,
)

__all__ = [
    "Navigator",
    "NodeLocation",
    "ChildLocation",
    "kind_of",
    "navigator",
]
