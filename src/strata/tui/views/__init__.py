"""Views shipped with strata-tui."""

from strata.tui.views.debug_view import DebugView
from strata.tui.views.layer import Layer
from strata.tui.views.menu_popup import FallbackKeys, MenuPopup
from strata.tui.views.menubar import Menubar, MenubarState
from strata.tui.views.named_view import NamedView
from strata.tui.views.shadow_view import ShadowView
from strata.tui.views.stack_view import LayerPosition, Placement, StackView

__all__ = [
    "DebugView",
    "FallbackKeys",
    "Layer",
    "LayerPosition",
    "MenuPopup",
    "Menubar",
    "MenubarState",
    "NamedView",
    "Placement",
    "ShadowView",
    "StackView",
]
