"""Menu trees shown by ``Menubar`` and ``MenuPopup``.

A :class:`MenuTree` is an ordered list of :class:`MenuItem`: leaves
(a label and a callback), subtrees (a label and a nested tree) and
delimiters.  Mutators return the tree so definitions can be chained::

    file_menu = (
        MenuTree()
        .leaf("New", new_file)
        .subtree("Recent", MenuTree().leaf("notes.txt", open_notes))
        .delimiter()
        .leaf("Quit", lambda tui: tui.quit())
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from strata.tui.event import Callback
from strata.tui.utils import visible_width

__all__ = ["MenuItem", "MenuTree"]


@dataclass
class MenuItem:
    """One entry of a menu: ``leaf``, ``subtree`` or ``delimiter``."""

    kind: str
    label: str = ""
    callback: Callback | None = None
    tree: MenuTree | None = None

    @classmethod
    def leaf(cls, label: str, callback: Callback) -> MenuItem:
        return cls("leaf", label, callback=callback)

    @classmethod
    def subtree(cls, label: str, tree: MenuTree) -> MenuItem:
        return cls("subtree", label, tree=tree)

    @classmethod
    def delimiter(cls) -> MenuItem:
        return cls("delimiter")

    def is_leaf(self) -> bool:
        return self.kind == "leaf"

    def is_subtree(self) -> bool:
        return self.kind == "subtree"

    def is_delimiter(self) -> bool:
        return self.kind == "delimiter"

    def width(self) -> int:
        """Display width of the entry, including the ``>>`` of subtrees."""
        if self.is_delimiter():
            return 1
        if self.is_subtree():
            return visible_width(self.label) + 3
        return visible_width(self.label)


class MenuTree:
    """Ordered menu entries."""

    def __init__(self, children: list[MenuItem] | None = None) -> None:
        self.children: list[MenuItem] = list(children or [])

    # -- building ----------------------------------------------------------

    def leaf(self, label: str, callback: Callback) -> MenuTree:
        self.children.append(MenuItem.leaf(label, callback))
        return self

    def subtree(self, label: str, tree: MenuTree) -> MenuTree:
        self.children.append(MenuItem.subtree(label, tree))
        return self

    def delimiter(self) -> MenuTree:
        self.children.append(MenuItem.delimiter())
        return self

    def insert_leaf(self, index: int, label: str, callback: Callback) -> MenuTree:
        self.children.insert(index, MenuItem.leaf(label, callback))
        return self

    def insert_subtree(self, index: int, label: str, tree: MenuTree) -> MenuTree:
        self.children.insert(index, MenuItem.subtree(label, tree))
        return self

    def insert_delimiter(self, index: int) -> MenuTree:
        self.children.insert(index, MenuItem.delimiter())
        return self

    # -- lookup ------------------------------------------------------------

    def find_position(self, label: str) -> int | None:
        """Index of the first non-delimiter entry labelled *label*."""
        for i, item in enumerate(self.children):
            if not item.is_delimiter() and item.label == label:
                return i
        return None

    def find_item(self, label: str) -> MenuItem | None:
        index = self.find_position(label)
        return None if index is None else self.children[index]

    def find_subtree(self, label: str) -> MenuTree | None:
        item = self.find_item(label)
        if item is None or not item.is_subtree():
            return None
        return item.tree

    # -- removal -----------------------------------------------------------

    def remove(self, index: int) -> MenuItem:
        return self.children.pop(index)

    def clear(self) -> None:
        self.children.clear()

    # -- container protocol ------------------------------------------------

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self.children)

    def __getitem__(self, index: int) -> MenuItem:
        return self.children[index]

    def is_empty(self) -> bool:
        return not self.children

    def max_width(self) -> int:
        """Widest entry, at least 1."""
        return max((item.width() for item in self.children), default=1)

    def __repr__(self) -> str:
        return f"MenuTree({[item.label or '-' for item in self.children]!r})"
