"""strata-tui: retained-mode terminal UI with layered views."""

# Backends
from strata.tui.backend import Backend, InputRequest
from strata.tui.backend.ansi import AnsiBackend
from strata.tui.backend.dummy import DummyBackend
from strata.tui.backend.puppet import PuppetBackend
from strata.tui.backend.puppet.observed import ObservedScreen

# Geometry
from strata.tui.direction import Direction

# Events
from strata.tui.event import (
    EXIT,
    REFRESH,
    WINDOW_RESIZE,
    AltChar,
    Callback,
    Char,
    CtrlChar,
    Event,
    EventResult,
    Key,
    KeyEvent,
    Mouse,
    MouseButton,
    MouseEvent,
)

# Menus
from strata.tui.menu import MenuItem, MenuTree
from strata.tui.position import Offset, Position
from strata.tui.printer import Printer

# Theme
from strata.tui.theme import (
    BaseColor,
    BorderStyle,
    Color,
    ColorPair,
    ColorStyle,
    Effect,
    Palette,
    PaletteColor,
    Theme,
    ThemeError,
)

# Root controller
from strata.tui.tui import DEBUG_VIEW_ID, TUI
from strata.tui.vec import Vec2

# Views
from strata.tui.view import Selector, View, ViewWrapper
from strata.tui.views import (
    DebugView,
    Layer,
    LayerPosition,
    MenuPopup,
    Menubar,
    NamedView,
    Placement,
    ShadowView,
    StackView,
)

__all__ = [
    # Backends
    "AnsiBackend",
    "Backend",
    "DummyBackend",
    "InputRequest",
    "ObservedScreen",
    "PuppetBackend",
    # Geometry
    "Direction",
    "Offset",
    "Position",
    "Printer",
    "Vec2",
    # Events
    "EXIT",
    "REFRESH",
    "WINDOW_RESIZE",
    "AltChar",
    "Callback",
    "Char",
    "CtrlChar",
    "Event",
    "EventResult",
    "Key",
    "KeyEvent",
    "Mouse",
    "MouseButton",
    "MouseEvent",
    # Menus
    "MenuItem",
    "MenuTree",
    # Theme
    "BaseColor",
    "BorderStyle",
    "Color",
    "ColorPair",
    "ColorStyle",
    "Effect",
    "Palette",
    "PaletteColor",
    "Theme",
    "ThemeError",
    # Root controller
    "DEBUG_VIEW_ID",
    "TUI",
    # Views
    "DebugView",
    "Layer",
    "LayerPosition",
    "MenuPopup",
    "Menubar",
    "NamedView",
    "Placement",
    "Selector",
    "ShadowView",
    "StackView",
    "View",
    "ViewWrapper",
]
