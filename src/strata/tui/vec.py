"""Two-dimensional integer vectors used for sizes, positions and offsets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = ["Vec2", "VecLike"]


@dataclass(frozen=True, order=False)
class Vec2:
    """An ``(x, y)`` pair of non-negative cell counts.

    ``x`` is the column (width) axis and ``y`` the row (height) axis.
    Arithmetic is component-wise.  Comparisons other than equality are
    deliberately absent: use :meth:`fits` and :meth:`fits_in_rect`.
    """

    x: int = 0
    y: int = 0

    # -- construction ------------------------------------------------------

    @classmethod
    def zero(cls) -> Vec2:
        return cls(0, 0)

    @classmethod
    def of(cls, value: VecLike) -> Vec2:
        """Coerce a ``Vec2``, an ``(x, y)`` tuple or a scalar into a ``Vec2``."""
        if isinstance(value, Vec2):
            return value
        if isinstance(value, int):
            return cls(value, value)
        x, y = value
        return cls(int(x), int(y))

    # -- arithmetic --------------------------------------------------------

    def __add__(self, other: VecLike) -> Vec2:
        o = Vec2.of(other)
        return Vec2(self.x + o.x, self.y + o.y)

    def __sub__(self, other: VecLike) -> Vec2:
        o = Vec2.of(other)
        return Vec2(self.x - o.x, self.y - o.y)

    def __floordiv__(self, other: int) -> Vec2:
        return Vec2(self.x // other, self.y // other)

    def __iter__(self):
        yield self.x
        yield self.y

    def saturating_sub(self, other: VecLike) -> Vec2:
        """Subtract, clamping each component at zero."""
        o = Vec2.of(other)
        return Vec2(max(0, self.x - o.x), max(0, self.y - o.y))

    def checked_sub(self, other: VecLike) -> Vec2 | None:
        """Subtract, or return ``None`` if either component would go negative."""
        o = Vec2.of(other)
        if o.x > self.x or o.y > self.y:
            return None
        return Vec2(self.x - o.x, self.y - o.y)

    @staticmethod
    def min(a: VecLike, b: VecLike) -> Vec2:
        a, b = Vec2.of(a), Vec2.of(b)
        return Vec2(min(a.x, b.x), min(a.y, b.y))

    @staticmethod
    def max(a: VecLike, b: VecLike) -> Vec2:
        a, b = Vec2.of(a), Vec2.of(b)
        return Vec2(max(a.x, b.x), max(a.y, b.y))

    # -- predicates --------------------------------------------------------

    def fits(self, other: VecLike) -> bool:
        """Return ``True`` if ``self`` is no larger than *other* on both axes."""
        o = Vec2.of(other)
        return self.x <= o.x and self.y <= o.y

    def strictly_lt(self, other: VecLike) -> bool:
        o = Vec2.of(other)
        return self.x < o.x and self.y < o.y

    def fits_in_rect(self, top_left: VecLike, size: VecLike) -> bool:
        """Return ``True`` if this point lies in the rectangle ``top_left + size``."""
        top_left = Vec2.of(top_left)
        return top_left.fits(self) and self.strictly_lt(top_left + size)

    # -- conversions -------------------------------------------------------

    def pair(self) -> tuple[int, int]:
        return (self.x, self.y)

    def with_x(self, x: int) -> Vec2:
        return Vec2(x, self.y)

    def with_y(self, y: int) -> Vec2:
        return Vec2(self.x, y)

    def __repr__(self) -> str:
        return f"Vec2({self.x}, {self.y})"


VecLike = Union[Vec2, tuple[int, int], int]
