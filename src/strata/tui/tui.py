"""Root controller: owns the screens, the menubar and the backend.

The :class:`TUI` runs a simple loop::

    tui = TUI()
    tui.add_layer(MyView())
    tui.add_global_callback("q", lambda tui: tui.quit())
    tui.run()

Each :meth:`TUI.step` drains pending input events, then the callbacks
queued through :meth:`TUI.cb_sink` (from any thread), and redraws when
something happened.  Events go to the focused menubar, else to the active
screen; events nobody consumes fall back to the global callbacks.
"""

from __future__ import annotations

import logging
import os
import queue
import time
import weakref
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from strata.tui.backend.ansi import AnsiBackend
from strata.tui.event import EXIT, WINDOW_RESIZE, Callback, Event, EventLike, Mouse, to_event
from strata.tui.position import Position
from strata.tui.printer import Printer
from strata.tui.theme import PaletteColor, Theme, ThemeError, load_default, load_theme_file, load_toml
from strata.tui.vec import Vec2
from strata.tui.view import Selector, View
from strata.tui.views.debug_view import DebugView
from strata.tui.views.menubar import Menubar
from strata.tui.views.named_view import NamedView
from strata.tui.views.stack_view import LayerPosition, StackView

if TYPE_CHECKING:
    from types import TracebackType

    from strata.tui.backend import Backend

logger = logging.getLogger(__name__)

__all__ = ["TUI", "ScreenId", "DEBUG_VIEW_ID", "IDLE_SLEEP"]

# Index of a screen in the controller.
ScreenId = int

# Name (and layer id) of the debug console.
DEBUG_VIEW_ID = "_strata_debug_view"

# Seconds slept by an idle step.
IDLE_SLEEP = 0.03

T = TypeVar("T")


class TUI:
    """Central point of an application: screens, menubar, input loop."""

    def __init__(
        self,
        backend: Backend | None = None,
        *,
        autorefresh: bool | None = None,
        theme: Theme | None = None,
    ) -> None:
        self._backend: Backend = backend if backend is not None else AnsiBackend()
        self._finalizer = weakref.finalize(self, self._backend.finish)

        self._theme = theme if theme is not None else _theme_from_env()
        self._screens: list[StackView] = [StackView()]
        self._active_screen: ScreenId = 0
        self._global_callbacks: dict[Event, list[Callback]] = {}
        self._menubar = Menubar()
        self._running = True
        self._cb_queue: queue.SimpleQueue[Callback] = queue.SimpleQueue()
        self._last_sizes: list[Vec2] = []

        if autorefresh is None:
            autorefresh = os.environ.get("STRATA_TUI_AUTOREFRESH", "") == "1"
        self._autorefresh = autorefresh
        self._frame_interval = IDLE_SLEEP

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the backend.  Safe to call more than once."""
        self._running = False
        self._finalizer()

    def __enter__(self) -> TUI:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def is_running(self) -> bool:
        return self._running

    def quit(self) -> None:
        """Stop the loop; in-flight events and callbacks still complete."""
        logger.debug("Quit requested")
        self._running = False

    def run(self) -> None:
        """Run the event loop until :meth:`quit` is called."""
        self._running = True
        self.refresh()
        while self._running:
            self.step()

    def step(self) -> None:
        """Process pending events and callbacks, then redraw or idle."""
        boring = True

        while True:
            event = self._backend.poll_event()
            if event is None:
                break
            boring = False
            self.on_event(event)
            if not self._running:
                return

        while True:
            try:
                callback = self._cb_queue.get_nowait()
            except queue.Empty:
                break
            boring = False
            callback(self)
            if not self._running:
                return

        if not boring or self._autorefresh:
            self.refresh()
        if boring:
            time.sleep(self._frame_interval if self._autorefresh else IDLE_SLEEP)

    def cb_sink(self) -> queue.SimpleQueue[Callback]:
        """Queue through which any thread may schedule a callback on the main loop."""
        return self._cb_queue

    def noop(self) -> None:
        """Does nothing; handy as a callback that only forces a redraw."""

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def on_event(self, event: Event) -> None:
        """Route *event*: controller signals, menubar, active screen, global callbacks."""
        if event == EXIT:
            self.quit()
            return

        if event == WINDOW_RESIZE:
            # Falls through to normal dispatch.
            for screen in self._screens:
                screen.bg_dirty = True

        if (
            isinstance(event, Mouse)
            and event.event.grabs_focus()
            and not self._menubar.autohide
            and not self._menubar.has_submenu()
            and event.position.y == 0
        ):
            self.select_menubar()

        if self._menubar.receive_events():
            self._menubar.on_event(event).process(self)
            return

        result = self.screen().on_event(event.relativized((0, self._menu_row())))
        if result.is_consumed():
            result.process(self)
            return

        # Callbacks may edit the table while running.
        for callback in list(self._global_callbacks.get(event, ())):
            callback(self)

    def add_global_callback(self, event: EventLike, callback: Callback) -> None:
        """Run *callback* whenever *event* reaches the controller unconsumed."""
        self._global_callbacks.setdefault(to_event(event), []).append(callback)

    def clear_global_callbacks(self, event: EventLike) -> None:
        self._global_callbacks.pop(to_event(event), None)

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def screen(self) -> StackView:
        """The active screen."""
        return self._screens[self._active_screen]

    def active_screen(self) -> ScreenId:
        return self._active_screen

    def add_screen(self) -> ScreenId:
        """Add an empty screen and return its id.  The active screen is unchanged."""
        self._screens.append(StackView())
        return len(self._screens) - 1

    def add_active_screen(self) -> ScreenId:
        screen_id = self.add_screen()
        self.set_screen(screen_id)
        return screen_id

    def set_screen(self, screen_id: ScreenId) -> None:
        """Make *screen_id* the active screen; an unknown id raises :class:`IndexError`."""
        if not 0 <= screen_id < len(self._screens):
            raise IndexError(f"no screen with id {screen_id} ({len(self._screens)} screens)")
        self._active_screen = screen_id
        logger.debug("Switched to screen %d", screen_id)

    # ------------------------------------------------------------------
    # Layers (on the active screen)
    # ------------------------------------------------------------------

    def add_layer(self, view: View, id: str | None = None, *, transient: bool = False) -> None:
        self.screen().add_layer(view, id, transient=transient)

    def add_layer_at(
        self,
        position: Position,
        view: View,
        id: str | None = None,
        *,
        transient: bool = False,
    ) -> None:
        self.screen().add_layer_at(position, view, id, transient=transient)

    def add_fullscreen_layer(self, view: View, id: str | None = None) -> None:
        self.screen().add_fullscreen_layer(view, id)

    def pop_layer(self) -> View | None:
        return self.screen().pop_layer()

    def reposition_layer(self, layer: LayerPosition, position: Position) -> None:
        self.screen().reposition_layer(layer, position)

    # ------------------------------------------------------------------
    # Lookup and focus
    # ------------------------------------------------------------------

    def call_on(self, selector: Selector, callback: Callable[[View], T]) -> T | None:
        """Run *callback* on the first view of the active screen matching *selector*.

        Returns the callback's result, or ``None`` if nothing matched.
        """
        results: list[Any] = []

        def _first(view: View) -> None:
            if not results:
                results.append(callback(view))

        self.screen().call_on_any(selector, _first)
        return results[0] if results else None

    def call_on_name(self, name: str, callback: Callable[[View], T]) -> T | None:
        return self.call_on(Selector.name(name), callback)

    def find_name(self, name: str) -> View | None:
        """The view registered under *name* on the active screen."""
        return self.call_on_name(name, lambda view: view)

    def focus(self, selector: Selector) -> bool:
        return self.screen().focus_view(selector)

    def focus_name(self, name: str) -> bool:
        return self.focus(Selector.name(name))

    # ------------------------------------------------------------------
    # Menubar
    # ------------------------------------------------------------------

    def menubar(self) -> Menubar:
        return self._menubar

    def select_menubar(self) -> None:
        """Give focus to the menubar."""
        self._menubar.select()

    def set_autohide_menu(self, autohide: bool) -> None:
        """Hide the menubar when unfocused (default), or pin it to the first row."""
        self._menubar.autohide = autohide

    def _menu_row(self) -> int:
        return 0 if self._menubar.autohide else 1

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def current_theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        self._theme = theme
        self.clear()

    def load_theme_file(self, path: str | Path) -> None:
        """Load a TOML theme file.  On :class:`ThemeError` the current theme is kept."""
        self.set_theme(load_theme_file(path))

    def load_toml(self, content: str) -> None:
        self.set_theme(load_toml(content))

    # ------------------------------------------------------------------
    # Debug console
    # ------------------------------------------------------------------

    def show_debug_console(self) -> None:
        """Show the log buffer in a layer on the active screen."""
        self.add_layer(NamedView(DebugView(), DEBUG_VIEW_ID), DEBUG_VIEW_ID)

    def toggle_debug_console(self) -> None:
        screen = self.screen()
        index = screen.child_pos_with_view_id(DEBUG_VIEW_ID)
        if index is None:
            self.show_debug_console()
        else:
            screen.remove_layer(LayerPosition.from_back(index))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Clear the whole terminal with the background color."""
        self._backend.clear(self._theme.palette[PaletteColor.BACKGROUND])

    def set_autorefresh(self, autorefresh: bool) -> None:
        """Redraw on every step, even when nothing happened."""
        self._autorefresh = autorefresh

    def set_fps(self, fps: int) -> None:
        """Redraw at most *fps* times per second when idle; ``0`` turns it off."""
        if fps <= 0:
            self._autorefresh = False
            self._frame_interval = IDLE_SLEEP
        else:
            self._autorefresh = True
            self._frame_interval = 1.0 / fps

    def screen_size(self) -> Vec2:
        return self._backend.screen_size()

    def refresh(self) -> None:
        """Lay out and draw the active screen, then flush the backend."""
        self.layout()
        self.draw()
        self._backend.refresh()

    def layout(self) -> None:
        size = self.screen_size().saturating_sub((0, self._menu_row()))
        self.screen().layout(size)

    def draw(self) -> None:
        sizes = self.screen().layer_sizes()
        if sizes != self._last_sizes:
            self.clear()
            self._last_sizes = sizes

        menubar_selected = self._menubar.receive_events()
        printer = Printer(self.screen_size(), self._theme, self._backend)
        screen_printer = printer.translated((0, self._menu_row())).refocused(not menubar_selected)

        screen = self.screen()
        screen.draw_bg(screen_printer)

        if self._menubar.visible():
            self._menubar.draw(printer.cropped((printer.size.x, 1)).refocused(menubar_selected))

        screen.draw_fg(screen_printer)

    def __repr__(self) -> str:
        return (
            f"TUI(screens={len(self._screens)}, active={self._active_screen}, "
            f"running={self._running})"
        )


def _theme_from_env() -> Theme:
    path = os.environ.get("STRATA_TUI_THEME")
    if not path:
        return load_default()
    try:
        return load_theme_file(path)
    except ThemeError as exc:
        logger.warning("Ignoring theme %s: %s", path, exc)
        return load_default()
