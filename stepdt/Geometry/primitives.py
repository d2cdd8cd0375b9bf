"""
Value types shared by the kernel, the mesh and the engine.

Point and Triangle compare exactly: two points are equal only when both
coordinates are bit-for-bit equal, and two triangles are equal only when
their vertices appear in the same order. Edge compares undirected.
"""
from __future__ import annotations

from typing import Iterator, NamedTuple


class Point(NamedTuple):
    x: float
    y: float

    def __repr__(self):
        return f"Point({self.x!r}, {self.y!r})"


class Triangle(NamedTuple):
    """Ordered triple of points. (a, b, c) != (b, c, a)."""
    a: Point
    b: Point
    c: Point

    def __repr__(self):
        return f"Triangle({self.a}, {self.b}, {self.c})"

    def has_vertex(self, point: Point) -> bool:
        return point == self.a or point == self.b or point == self.c

    def same_vertices(self, other: Triangle) -> bool:
        """True if `other` holds the same three points in any order."""
        return sorted(self) == sorted(other)


class Edge:
    """
    One side of a triangle, kept in the triangle's vertex order.
    Equality and hashing ignore direction: Edge(p, q) == Edge(q, p).
    """
    __slots__ = ("p", "q")

    def __init__(self, p: Point, q: Point):
        self.p = p
        self.q = q

    def reversed(self) -> Edge:
        return Edge(self.q, self.p)

    def __iter__(self) -> Iterator[Point]:
        yield self.p
        yield self.q

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return ((self.p == other.p and self.q == other.q) or
                (self.p == other.q and self.q == other.p))

    def __hash__(self):
        return hash(frozenset((self.p, self.q)))

    def __repr__(self):
        return f"Edge({self.p}, {self.q})"


class Circle(NamedTuple):
    center: Point
    radius: float

    def __repr__(self):
        return f"Circle(center={self.center}, r={self.radius:.4f})"
