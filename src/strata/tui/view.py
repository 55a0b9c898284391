"""The view contract.

Every element of the tree subclasses :class:`View` and overrides only the
capabilities it needs; the defaults describe an inert 1x1 view that
ignores events and refuses focus.  The controller drives views through
three phases:

1. ``required_size`` (any number of times) and ``layout`` (once the size is
   settled);
2. ``draw`` with a :class:`~strata.tui.printer.Printer` restricted to the
   granted area;
3. ``on_event`` for input routed to the view, returning an
   :class:`~strata.tui.event.EventResult`.

Structural lookup goes through :meth:`View.call_on_any` and
:meth:`View.focus_view` with a :class:`Selector`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from strata.tui.direction import Direction
from strata.tui.event import Event, EventResult
from strata.tui.vec import Vec2

if TYPE_CHECKING:
    from strata.tui.printer import Printer

__all__ = ["Selector", "View", "ViewWrapper"]


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


class Selector:
    """Identifies views during a structural search."""

    __slots__ = ("_name", "_predicate")

    def __init__(
        self,
        name: str | None = None,
        predicate: Callable[[View], bool] | None = None,
    ) -> None:
        self._name = name
        self._predicate = predicate

    @classmethod
    def name(cls, name: str) -> Selector:
        """Match the view registered under *name* (see ``NamedView``)."""
        return cls(name=name)

    @classmethod
    def predicate(cls, fn: Callable[[View], bool]) -> Selector:
        """Match every view for which *fn* returns ``True``."""
        return cls(predicate=fn)

    @property
    def view_name(self) -> str | None:
        return self._name

    def matches(self, view: View) -> bool:
        """Return ``True`` if *view* itself satisfies a predicate selector."""
        return self._predicate is not None and self._predicate(view)

    def __repr__(self) -> str:
        if self._name is not None:
            return f"Selector.name({self._name!r})"
        return f"Selector.predicate({self._predicate!r})"


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


class View:
    """Base class for everything that can be put on screen."""

    def draw(self, printer: Printer) -> None:
        """Draw the view.  Must not change the view's state."""

    def layout(self, size: Vec2) -> None:
        """Commit to *size*; called after size negotiation, before drawing."""

    def needs_relayout(self) -> bool:
        return True

    def required_size(self, constraint: Vec2) -> Vec2:
        """Return the size this view wants when given at most *constraint*."""
        return Vec2(1, 1)

    def on_event(self, event: Event) -> EventResult:
        return EventResult.ignored()

    def take_focus(self, source: Direction) -> bool:
        """Attempt to take focus coming from *source*; ``False`` to refuse."""
        return False

    def call_on_any(self, selector: Selector, callback: Callable[[View], Any]) -> None:
        """Run *callback* on every view in this subtree matched by *selector*."""
        if selector.matches(self):
            callback(self)

    def focus_view(self, selector: Selector) -> bool:
        """Move focus to the view matched by *selector*; ``False`` if not found."""
        return False


class ViewWrapper(View):
    """A view that forwards every capability to an inner view.

    Subclasses override the methods they want to alter and call ``super()``
    for the rest.
    """

    def __init__(self, view: View) -> None:
        self.view = view

    def draw(self, printer: Printer) -> None:
        self.view.draw(printer)

    def layout(self, size: Vec2) -> None:
        self.view.layout(size)

    def needs_relayout(self) -> bool:
        return self.view.needs_relayout()

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.view.required_size(constraint)

    def on_event(self, event: Event) -> EventResult:
        return self.view.on_event(event)

    def take_focus(self, source: Direction) -> bool:
        return self.view.take_focus(source)

    def call_on_any(self, selector: Selector, callback: Callable[[View], Any]) -> None:
        super().call_on_any(selector, callback)
        self.view.call_on_any(selector, callback)

    def focus_view(self, selector: Selector) -> bool:
        return self.view.focus_view(selector)
