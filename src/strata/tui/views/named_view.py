"""Wrapper registering its inner view under a name for structural lookup."""

from __future__ import annotations

from typing import Any, Callable

from strata.tui.view import Selector, View, ViewWrapper

__all__ = ["NamedView"]


class NamedView(ViewWrapper):
    """Makes the inner view reachable through ``Selector.name(name)``.

    ``call_on_any`` hands the *inner* view to the callback, so callers get
    the object they registered, not this wrapper.
    """

    def __init__(self, view: View, name: str) -> None:
        super().__init__(view)
        self.name = name

    def call_on_any(self, selector: Selector, callback: Callable[[View], Any]) -> None:
        if selector.view_name == self.name:
            callback(self.view)
            return
        super().call_on_any(selector, callback)

    def focus_view(self, selector: Selector) -> bool:
        # A match reports success; the enclosing container owns the focus.
        if selector.view_name == self.name:
            return True
        return self.view.focus_view(selector)

    def __repr__(self) -> str:
        return f"NamedView({self.name!r}, {self.view!r})"
