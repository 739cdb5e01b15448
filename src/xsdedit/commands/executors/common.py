"""
Tree mutation helpers shared by the executors.

List-valued children are ``None`` when absent. Appending to an absent list
creates it; removing the last entry resets it to ``None``.
"""

from typing import Any

from xsdedit.navigation import ChildLocation


def append_child(owner: Any, field: str, item: Any) -> int:
    """
    Append ``item`` to the list held in ``owner.field``, creating it if absent.

    Returns:
        Position of the new item
    """
    items = getattr(owner, field)
    if items is None:
        items = []
        setattr(owner, field, items)
    items.append(item)
    return len(items) - 1


def remove_child(location: ChildLocation) -> Any:
    """
    Detach the child described by ``location`` from its container.

    Returns:
        The removed node
    """
    container = location.container
    if location.index is None:
        setattr(container, location.field, None)
        return location.node

    items = getattr(container, location.field)
    removed = items.pop(location.index)
    if not items:
        setattr(container, location.field, None)
    return removed


def use_marker(required: bool | None) -> str | None:
    """Map the wire ``required`` flag to the stored ``use`` value."""
    if required is None:
        return None
    return "required" if required else "optional"
