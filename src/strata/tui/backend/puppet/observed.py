"""Frames recorded by the puppet backend.

An :class:`ObservedScreen` is a fixed-size, row-major grid of cells.  Each
cell is either empty (``None``) or an :class:`ObservedCell` holding the
style it was printed with and a :class:`GraphemePart`: the beginning of a
grapheme, or the continuation of a wide grapheme started in the cell to its
left.

Pieces of a screen (:class:`ObservedPiece`, :class:`ObservedLine`) are
views onto the same grid; they are what :meth:`ObservedScreen.find_occurrences`
returns and what tests assert against::

    hits = screen.find_occurrences("hello")
    assert str(hits[0].expanded_line(4, 0)) == "abc hello"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from strata.tui.theme import ColorPair, Effect
from strata.tui.utils import grapheme_width, graphemes, visible_width
from strata.tui.vec import Vec2, VecLike

__all__ = [
    "ObservedStyle",
    "GraphemePart",
    "ObservedCell",
    "ObservedPieceInterface",
    "ObservedScreen",
    "ObservedPiece",
    "ObservedLine",
]


@dataclass(frozen=True)
class ObservedStyle:
    """Colors and effects a cell was printed with.

    Styles are immutable and shared between cells; changing the backend's
    current style builds a new one.
    """

    colors: ColorPair
    effects: frozenset[Effect] = field(default_factory=frozenset)


@dataclass(frozen=True)
class GraphemePart:
    """Content of a cell: ``begin(text)`` or :data:`CONTINUATION`."""

    text: Optional[str]

    CONTINUATION: ClassVar[GraphemePart]

    @classmethod
    def begin(cls, text: str) -> GraphemePart:
        return cls(text)

    def is_continuation(self) -> bool:
        return self.text is None

    def as_option(self) -> str | None:
        return self.text

    def unwrap(self) -> str:
        if self.text is None:
            raise ValueError("unwrapping a continuation cell")
        return self.text

    def __repr__(self) -> str:
        if self.text is None:
            return "GraphemePart.CONTINUATION"
        return f"GraphemePart.begin({self.text!r})"


GraphemePart.CONTINUATION = GraphemePart(None)


@dataclass(frozen=True)
class ObservedCell:
    pos: Vec2
    style: ObservedStyle
    letter: GraphemePart

    @classmethod
    def new(cls, pos: VecLike, style: ObservedStyle, letter: str | None) -> ObservedCell:
        """Build a cell; a ``None`` letter makes a continuation cell."""
        part = GraphemePart.CONTINUATION if letter is None else GraphemePart.begin(letter)
        return cls(Vec2.of(pos), style, part)


# ---------------------------------------------------------------------------
# Pieces
# ---------------------------------------------------------------------------


class ObservedPieceInterface:
    """A rectangle ``[min, max)`` of an :class:`ObservedScreen`."""

    def min(self) -> Vec2:
        raise NotImplementedError

    def max(self) -> Vec2:
        raise NotImplementedError

    def parent(self) -> ObservedScreen:
        raise NotImplementedError

    def size(self) -> Vec2:
        return self.max() - self.min()

    def __getitem__(self, index: VecLike) -> ObservedCell | None:
        """Cell at *index*, relative to this piece's top-left corner."""
        index = Vec2.of(index)
        size = self.size()
        if not (0 <= index.x < size.x and 0 <= index.y < size.y):
            raise IndexError(f"{index!r} outside a piece of size {size!r}")
        return self.parent()._cell(self.min() + index)

    def as_strings(self) -> list[str]:
        """One string per row; empty cells render as spaces."""
        parent = self.parent()
        lo, hi = self.min(), self.max()
        rows: list[str] = []
        for y in range(lo.y, hi.y):
            chunks: list[str] = []
            for x in range(lo.x, hi.x):
                cell = parent._cell(Vec2(x, y))
                if cell is None:
                    chunks.append(" ")
                elif not cell.letter.is_continuation():
                    chunks.append(cell.letter.unwrap())
            rows.append("".join(chunks))
        return rows

    def expanded(self, up_left: VecLike, down_right: VecLike) -> ObservedPiece:
        """Sibling piece grown by *up_left* and *down_right*; must stay inside the screen."""
        up_left, down_right = Vec2.of(up_left), Vec2.of(down_right)
        lo, hi = self.min(), self.max()
        parent_size = self.parent().size()
        assert lo.x >= up_left.x and lo.y >= up_left.y
        assert hi.x + down_right.x <= parent_size.x
        assert hi.y + down_right.y <= parent_size.y
        return ObservedPiece(self.parent(), lo - up_left, hi + down_right)


class ObservedPiece(ObservedPieceInterface):
    def __init__(self, parent: ObservedScreen, min: VecLike, max: VecLike) -> None:
        self._parent = parent
        self._min = Vec2.of(min)
        self._max = Vec2.of(max)

    def min(self) -> Vec2:
        return self._min

    def max(self) -> Vec2:
        return self._max

    def parent(self) -> ObservedScreen:
        return self._parent

    def __repr__(self) -> str:
        return f"ObservedPiece({self._min!r}, {self._max!r})"


class ObservedLine(ObservedPieceInterface):
    """A horizontal run of cells on a single row."""

    def __init__(self, parent: ObservedScreen, line_start: VecLike, line_len: int) -> None:
        self._parent = parent
        self.line_start = Vec2.of(line_start)
        self.line_len = line_len

    def min(self) -> Vec2:
        return self.line_start

    def max(self) -> Vec2:
        return self.line_start + (self.line_len, 1)

    def parent(self) -> ObservedScreen:
        return self._parent

    def expanded_line(self, left: int, right: int) -> ObservedLine:
        """The same line widened by *left* and *right* cells; must stay inside the row."""
        assert left <= self.line_start.x, "expansion runs past the left edge"
        assert (
            self.line_start.x + self.line_len + right <= self._parent.size().x
        ), "expansion runs past the right edge"
        return ObservedLine(
            self._parent,
            self.line_start.with_x(self.line_start.x - left),
            self.line_len + left + right,
        )

    def __str__(self) -> str:
        return self.as_strings()[0]

    def __repr__(self) -> str:
        return f"ObservedLine({self.min()!r}-{self.max()!r}: {str(self)!r})"


# ---------------------------------------------------------------------------
# Screen
# ---------------------------------------------------------------------------


class ObservedScreen(ObservedPieceInterface):
    """A whole recorded frame."""

    def __init__(self, size: VecLike) -> None:
        self._size = Vec2.of(size)
        self._contents: list[ObservedCell | None] = [None] * (self._size.x * self._size.y)

    # -- addressing --------------------------------------------------------

    def flatten_index(self, index: VecLike) -> int:
        index = Vec2.of(index)
        if not (0 <= index.x < self._size.x and 0 <= index.y < self._size.y):
            raise IndexError(f"{index!r} outside a grid of size {self._size!r}")
        return index.y * self._size.x + index.x

    def unflatten_index(self, index: int) -> Vec2:
        if not 0 <= index < len(self._contents):
            raise IndexError(f"index {index} outside a grid of {len(self._contents)} cells")
        return Vec2(index % self._size.x, index // self._size.x)

    def _cell(self, pos: Vec2) -> ObservedCell | None:
        return self._contents[self.flatten_index(pos)]

    def __getitem__(self, index: VecLike) -> ObservedCell | None:
        return self._contents[self.flatten_index(index)]

    def __setitem__(self, index: VecLike, cell: ObservedCell | None) -> None:
        self._contents[self.flatten_index(index)] = cell

    # -- piece interface ---------------------------------------------------

    def min(self) -> Vec2:
        return Vec2(0, 0)

    def max(self) -> Vec2:
        return self._size

    def parent(self) -> ObservedScreen:
        return self

    def size(self) -> Vec2:
        return self._size

    def piece(self, min: VecLike, max: VecLike) -> ObservedPiece:
        """Rectangular subset ``[min, max)`` of this screen."""
        return ObservedPiece(self, min, max)

    # -- mutation ----------------------------------------------------------

    def clear(self, style: ObservedStyle) -> None:
        """Fill every cell with a blank printed in *style*."""
        blank = GraphemePart.begin(" ")
        self._contents = [
            ObservedCell(self.unflatten_index(i), style, blank)
            for i in range(len(self._contents))
        ]

    def copy(self) -> ObservedScreen:
        """Snapshot of this screen; cells are immutable and shared."""
        other = ObservedScreen(self._size)
        other._contents = list(self._contents)
        return other

    # -- search ------------------------------------------------------------

    def find_occurrences(self, pattern: str) -> list[ObservedLine]:
        """Every place *pattern* appears on a single row.

        An empty cell matches a space in *pattern*; an occupied cell must hold
        the pattern's next grapheme and advances by that grapheme's width.
        """
        symbols = list(graphemes(pattern))
        if not symbols:
            return []
        pattern_width = visible_width(pattern)
        hits: list[ObservedLine] = []
        for y in range(self._size.y):
            for x in range(self._size.x):
                if pattern_width > self._size.x - x:
                    continue
                length = self._match_at(x, y, symbols)
                if length is not None:
                    hits.append(ObservedLine(self, Vec2(x, y), length))
        return hits

    def _match_at(self, x: int, y: int, symbols: list[str]) -> int | None:
        cursor = 0
        for symbol in symbols:
            if x + cursor >= self._size.x:
                return None
            cell = self._contents[self.flatten_index((x + cursor, y))]
            found = cell.letter.as_option() if cell is not None else None
            if found is None:
                if symbol != " ":
                    return None
                cursor += 1
            elif found == symbol:
                cursor += max(1, grapheme_width(found))
            else:
                return None
        return cursor

    def __repr__(self) -> str:
        return f"ObservedScreen({self._size!r})"
